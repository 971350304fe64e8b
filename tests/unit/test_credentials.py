"""Tests for image-pull secret resolution."""

import logging
from typing import List

from workload_pipeline.core.collaborators import CredentialRecord
from workload_pipeline.workload.credentials import get_creds, get_domain, set_image_pull_secrets
from workload_pipeline.workload.memory import StaticCredentialLister


class FailingLister:
    """Lister whose backend is unavailable."""

    def list_credentials(self, scope: str) -> List[CredentialRecord]:
        raise RuntimeError("backend unavailable")


HUB = CredentialRecord(name="hub-pull", registries={"index.docker.io": {"username": "bot"}})
PRIVATE = CredentialRecord(name="private-pull", registries={"myregistry.example.com": {}})
TEAM_PRIVATE = CredentialRecord(
    name="team-pull",
    registries={"myregistry.example.com": {}},
    namespace_id="default",
)
OTHER_NAMESPACE = CredentialRecord(
    name="other-pull",
    registries={"myregistry.example.com": {}},
    namespace_id="other",
)


def _workload(*images):
    return {
        "name": "web",
        "namespaceId": "default",
        "containers": [{"name": f"c{i}", "image": image} for i, image in enumerate(images)],
    }


class TestGetDomain:
    """Tests for get_domain()."""

    def test_default_registry(self):
        """Test that bare image names resolve to the hub credential domain."""
        assert get_domain("nginx") == "index.docker.io"

    def test_explicit_docker_io(self):
        """Test that an explicit docker.io domain maps to index.docker.io."""
        assert get_domain("docker.io/library/nginx:1.19") == "index.docker.io"

    def test_private_registry(self):
        """Test that private registry domains are returned as-is."""
        assert get_domain("myregistry.example.com/app:v1") == "myregistry.example.com"

    def test_unparseable(self):
        """Test that an unparseable image has no domain."""
        assert get_domain("Not/A/Valid:image") == ""


class TestGetCreds:
    """Tests for get_creds()."""

    def test_namespaced_first_then_project(self):
        """Test that namespaced credentials precede project credentials."""
        lister = StaticCredentialLister([PRIVATE, TEAM_PRIVATE, OTHER_NAMESPACE])

        creds = get_creds(lister, "default")

        assert creds == {"myregistry.example.com": [{"name": "team-pull"}, {"name": "private-pull"}]}

    def test_lookup_failure_is_empty(self, caplog):
        """Test that a failing lookup yields no credentials and logs a warning."""
        with caplog.at_level(logging.WARNING):
            assert get_creds(FailingLister(), "default") == {}

        assert "backend unavailable" in caplog.text


class TestSetImagePullSecrets:
    """Tests for set_image_pull_secrets()."""

    def test_private_registry_match(self):
        """Test attaching the secret for a private registry image."""
        doc = _workload("myregistry.example.com/app:v1")

        set_image_pull_secrets(StaticCredentialLister([PRIVATE, HUB]), doc)

        assert doc["imagePullSecrets"] == [{"name": "private-pull"}]

    def test_default_registry_match(self):
        """Test attaching the secret for a default registry image."""
        doc = _workload("nginx")

        set_image_pull_secrets(StaticCredentialLister([PRIVATE, HUB]), doc)

        assert doc["imagePullSecrets"] == [{"name": "hub-pull"}]

    def test_other_namespace_ignored(self):
        """Test that credentials from another namespace are not used."""
        doc = _workload("myregistry.example.com/app:v1")

        set_image_pull_secrets(StaticCredentialLister([OTHER_NAMESPACE]), doc)

        assert "imagePullSecrets" not in doc

    def test_duplicates_across_containers_kept(self):
        """Test that each container contributes its own secrets."""
        doc = _workload("myregistry.example.com/app:v1", "myregistry.example.com/sidecar:v2")

        set_image_pull_secrets(StaticCredentialLister([PRIVATE]), doc)

        assert doc["imagePullSecrets"] == [{"name": "private-pull"}, {"name": "private-pull"}]

    def test_caller_value_wins(self):
        """Test that caller-supplied imagePullSecrets are never replaced."""
        doc = _workload("myregistry.example.com/app:v1")
        doc["imagePullSecrets"] = []

        set_image_pull_secrets(StaticCredentialLister([PRIVATE]), doc)

        assert doc["imagePullSecrets"] == []

    def test_unparseable_image_skipped(self):
        """Test that an unparseable image does not stop resolution."""
        doc = _workload("Bad/Image", "myregistry.example.com/app:v1")

        set_image_pull_secrets(StaticCredentialLister([PRIVATE]), doc)

        assert doc["imagePullSecrets"] == [{"name": "private-pull"}]

    def test_no_match_leaves_field_absent(self):
        """Test that no matching credential leaves the field unset."""
        doc = _workload("quay.io/org/app")

        set_image_pull_secrets(StaticCredentialLister([PRIVATE, HUB]), doc)

        assert "imagePullSecrets" not in doc

    def test_empty_image_skipped(self):
        """Test that containers without an image are ignored."""
        doc = _workload("")

        set_image_pull_secrets(StaticCredentialLister([HUB]), doc)

        assert "imagePullSecrets" not in doc

    def test_lookup_failure_leaves_field_absent(self):
        """Test that a failing lookup leaves the field unset."""
        doc = _workload("nginx")

        set_image_pull_secrets(FailingLister(), doc)

        assert "imagePullSecrets" not in doc

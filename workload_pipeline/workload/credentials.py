"""Image-pull secret resolution.

Maps each container image to the registry credentials declared for its
domain and records the matching secrets as ``imagePullSecrets`` on the
workload document.
"""

import logging
from typing import Any, Dict, List

from workload_pipeline.core.collaborators import (
    DOCKER_CREDENTIAL,
    NAMESPACED_DOCKER_CREDENTIAL,
    CredentialLister,
    CredentialRecord,
)
from workload_pipeline.core.document import get_value, put_value, to_str
from workload_pipeline.workload.constants import (
    DEFAULT_REGISTRY_CREDENTIAL_DOMAIN,
    DEFAULT_REGISTRY_DOMAIN,
)
from workload_pipeline.workload.reference import InvalidReference, parse_normalized_named
from workload_pipeline.workload.utils import get_containers

logger = logging.getLogger(__name__)


def get_domain(image: str) -> str:
    """Registry domain credentials for ``image`` are registered under.

    Returns "" when the image cannot be parsed.

    Example:
        >>> get_domain("nginx")
        'index.docker.io'
        >>> get_domain("myregistry.example.com/app:v1")
        'myregistry.example.com'
    """
    try:
        named = parse_normalized_named(image)
    except InvalidReference as e:
        logger.debug(f"Failed to parse image {image!r}: {e}")
        return ""
    if named.domain == DEFAULT_REGISTRY_DOMAIN:
        return DEFAULT_REGISTRY_CREDENTIAL_DOMAIN
    return named.domain


def _list(lister: CredentialLister, scope: str) -> List[CredentialRecord]:
    try:
        return list(lister.list_credentials(scope))
    except Exception as e:
        logger.warning(f"Failed to list {scope} records: {e}")
        return []


def _store(
    registries: Dict[str, Any],
    domain_to_creds: Dict[str, List[Dict[str, str]]],
    name: str,
) -> None:
    for domain in registries or {}:
        domain_to_creds.setdefault(domain, []).append({"name": name})


def get_creds(lister: CredentialLister, namespace_id: str) -> Dict[str, List[Dict[str, str]]]:
    """Build registry domain -> secret references for one namespace.

    Namespaced credentials only count when they live in ``namespace_id``;
    project-wide credentials always count. Namespaced references come first.
    """
    domain_to_creds: Dict[str, List[Dict[str, str]]] = {}
    for cred in _list(lister, NAMESPACED_DOCKER_CREDENTIAL):
        if cred.namespace_id == namespace_id:
            _store(cred.registries, domain_to_creds, cred.name)
    for cred in _list(lister, DOCKER_CREDENTIAL):
        _store(cred.registries, domain_to_creds, cred.name)
    return domain_to_creds


def set_image_pull_secrets(lister: CredentialLister, document: Dict[str, Any]) -> None:
    """Populate ``imagePullSecrets`` from credentials matching container images.

    A caller-supplied ``imagePullSecrets`` always wins. Secrets are appended
    per container, so two containers on one registry list its secrets twice.
    The field stays absent when nothing matched.

    Args:
        lister: Credential lookup collaborator
        document: Workload document, modified in place
    """
    value, _ = get_value(document, "imagePullSecrets")
    if value is not None:
        return

    containers = get_containers(document)
    if not containers:
        return

    domain_to_creds = get_creds(lister, to_str(document.get("namespaceId")))
    image_pull_secrets: List[Dict[str, str]] = []
    for container in containers:
        image = to_str(container.get("image"))
        if not image:
            continue
        domain = get_domain(image)
        if domain in domain_to_creds:
            image_pull_secrets.extend(dict(ref) for ref in domain_to_creds[domain])

    if image_pull_secrets:
        put_value(document, image_pull_secrets, "imagePullSecrets")

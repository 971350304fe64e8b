"""Container image reference parsing.

Implements the normalisation rules of the docker reference grammar, enough to
recover the registry domain of an image the way the container runtime will:

    reference := name [ ":" tag ] [ "@" digest ]
    name      := [domain "/"] path-component ["/" path-component]*

The first component is only a domain if it contains "." or ":" or is
"localhost"; otherwise the image lives on docker.io and single-component
names are expanded to ``library/<name>``.
"""

import re
from dataclasses import dataclass
from typing import Optional

from workload_pipeline.workload.constants import DEFAULT_REGISTRY_DOMAIN

NAME_TOTAL_LENGTH_MAX = 255

_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = _DOMAIN_COMPONENT + r"(?:\." + _DOMAIN_COMPONENT + r")*(?::[0-9]+)?"
_PATH_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|[-]*)[a-z0-9]+)*"
_TAG = r"[\w][\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"

_REFERENCE_RE = re.compile(
    r"^(?P<name>(?:(?P<domain>" + _DOMAIN + r")/)?"
    + r"(?P<path>" + _PATH_COMPONENT + r"(?:/" + _PATH_COMPONENT + r")*))"
    + r"(?::(?P<tag>" + _TAG + r"))?"
    + r"(?:@(?P<digest>" + _DIGEST + r"))?$"
)
_IDENTIFIER_RE = re.compile(r"^[a-f0-9]{64}$")


class InvalidReference(ValueError):
    """Raised when an image reference cannot be parsed."""


@dataclass(frozen=True)
class ImageReference:
    """Normalized image reference.

    Attributes:
        domain: Registry domain (``docker.io`` for the default registry)
        path: Repository path below the domain (``library/nginx``)
        tag: Optional tag
        digest: Optional ``algorithm:hex`` digest
    """

    domain: str
    path: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    @property
    def name(self) -> str:
        return f"{self.domain}/{self.path}"

    def __str__(self) -> str:
        text = self.name
        if self.tag:
            text += f":{self.tag}"
        if self.digest:
            text += f"@{self.digest}"
        return text


def _split_docker_domain(name: str):
    i = name.find("/")
    if i == -1 or (not any(c in name[:i] for c in ".:") and name[:i] != "localhost"):
        domain, remainder = DEFAULT_REGISTRY_DOMAIN, name
    else:
        domain, remainder = name[:i], name[i + 1:]
    if domain == "index.docker.io":
        domain = DEFAULT_REGISTRY_DOMAIN
    if domain == DEFAULT_REGISTRY_DOMAIN and "/" not in remainder:
        remainder = "library/" + remainder
    return domain, remainder


def parse_normalized_named(image: str) -> ImageReference:
    """Parse an image string into a fully-qualified reference.

    Args:
        image: Image as written in a container spec (``nginx``,
               ``quay.io/org/app:v1``, ``localhost:5000/app@sha256:...``)

    Returns:
        ImageReference with the domain made explicit

    Raises:
        InvalidReference: If the string is not a valid image reference

    Example:
        >>> parse_normalized_named("nginx").name
        'docker.io/library/nginx'
    """
    if not image:
        raise InvalidReference("repository name must have at least one component")
    if _IDENTIFIER_RE.match(image):
        raise InvalidReference(
            f"invalid repository name ({image}), cannot specify 64-byte hexadecimal strings"
        )

    domain, remainder = _split_docker_domain(image)
    # Only the repository path has to be lowercase; tag and digest may not be
    repository = re.split(r"[:@]", remainder, maxsplit=1)[0]
    if repository.lower() != repository:
        raise InvalidReference("repository name must be lowercase")

    match = _REFERENCE_RE.match(f"{domain}/{remainder}")
    if match is None or match.group("domain") is None:
        raise InvalidReference(f"invalid reference format: {image}")
    if len(match.group("name")) > NAME_TOTAL_LENGTH_MAX:
        raise InvalidReference(
            f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters"
        )

    return ImageReference(
        domain=match.group("domain"),
        path=match.group("path"),
        tag=match.group("tag"),
        digest=match.group("digest"),
    )

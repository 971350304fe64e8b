"""Collaborator protocols consumed by the workload pipeline.

The pipeline never talks to a database or API server directly. Credential
lookup, node lookup and persistence are injected through the protocols
below; any object with matching methods can be passed in.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

NAMESPACED_DOCKER_CREDENTIAL = "namespacedDockerCredential"
DOCKER_CREDENTIAL = "dockerCredential"


@dataclass
class CredentialRecord:
    """Image-pull credential visible to the caller.

    Attributes:
        name: Name of the backing secret; emitted as the local object reference
        registries: Mapping of registry domain to registry entry
                    (username, etc.). Only the domains are used here.
        namespace_id: Namespace of a namespaced credential, None when the
                      credential is project-wide (``dockerCredential``)

    Example:
        >>> cred = CredentialRecord(
        ...     name="quay-pull",
        ...     registries={"quay.io": {"username": "bot"}},
        ... )
        >>> cred.scoped
        False
    """

    name: str
    registries: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    namespace_id: Optional[str] = None

    @property
    def scoped(self) -> bool:
        return self.namespace_id is not None


class CredentialLister(Protocol):
    """Lists credential records for one scope.

    ``scope`` is ``"namespacedDockerCredential"`` or ``"dockerCredential"``.
    Implementations may raise; the pipeline treats any failure as an empty
    result.
    """

    def list_credentials(self, scope: str) -> List[CredentialRecord]:
        ...


class NodeResolver(Protocol):
    """Maps an external node identifier (e.g. ``c-abc:m-123``) to its node name."""

    def resolve_node_name(self, node_id: str) -> str:
        ...


class Store(Protocol):
    """Underlying persistence wrapped by the pipeline.

    Errors raised here propagate to the caller unchanged.
    """

    def create(self, kind: str, document: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def update(self, kind: str, identifier: str, document: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def by_id(self, kind: str, identifier: str) -> Dict[str, Any]:
        ...

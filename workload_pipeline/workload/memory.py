"""In-memory collaborators.

Reference implementations of the Store, CredentialLister and NodeResolver
protocols, used by the CLI and by tests.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional

from workload_pipeline.core.collaborators import NAMESPACED_DOCKER_CREDENTIAL, CredentialRecord
from workload_pipeline.core.document import to_str
from workload_pipeline.core.errors import NotFound
from workload_pipeline.workload.utils import split_type_and_id

logger = logging.getLogger(__name__)


def _short_id(identifier: str) -> str:
    if ":" in identifier:
        _, identifier = split_type_and_id(identifier)
    return identifier


class InMemoryStore:
    """Dict-backed Store keyed by kind and workload name.

    Documents are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def create(self, kind: str, document: Dict[str, Any]) -> Dict[str, Any]:
        stored = copy.deepcopy(document)
        short_id = to_str(stored.get("id")) or to_str(stored.get("name"))
        stored["id"] = short_id
        self.documents.setdefault(kind.lower(), {})[short_id] = stored
        logger.debug(f"Stored {kind} {short_id}")
        return copy.deepcopy(stored)

    def update(self, kind: str, identifier: str, document: Dict[str, Any]) -> Dict[str, Any]:
        short_id = _short_id(identifier)
        documents = self.documents.get(kind.lower(), {})
        if short_id not in documents:
            raise NotFound(f"{kind} {identifier} not found")
        stored = copy.deepcopy(document)
        stored["id"] = short_id
        documents[short_id] = stored
        return copy.deepcopy(stored)

    def by_id(self, kind: str, identifier: str) -> Dict[str, Any]:
        try:
            return copy.deepcopy(self.documents[kind.lower()][identifier])
        except KeyError:
            raise NotFound(f"{kind} {identifier} not found") from None


class StaticCredentialLister:
    """CredentialLister over a fixed list of records."""

    def __init__(self, records: Optional[Iterable[CredentialRecord]] = None):
        self.records: List[CredentialRecord] = list(records or [])

    def list_credentials(self, scope: str) -> List[CredentialRecord]:
        if scope == NAMESPACED_DOCKER_CREDENTIAL:
            return [r for r in self.records if r.scoped]
        return [r for r in self.records if not r.scoped]


class StaticNodeResolver:
    """NodeResolver over a fixed node-id -> node-name mapping.

    Unknown ids raise NotFound, as a real lookup would.
    """

    def __init__(self, nodes: Optional[Dict[str, str]] = None):
        self.nodes = dict(nodes or {})

    def resolve_node_name(self, node_id: str) -> str:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NotFound(f"node {node_id} not found") from None

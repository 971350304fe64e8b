"""Workload store: runs the mutation passes around an underlying Store.

Create:  selector -> defaults -> image pull secrets -> ports -> scheduling
         -> strategy -> Store.create
Update:  ports -> scheduling -> strategy -> Store.update
ByID:    identifier normalisation -> Store.by_id

All mutation happens on the in-memory document before the single storage
call, so a failing pass leaves nothing persisted.
"""

import logging
from typing import Any, Dict

from workload_pipeline.core.collaborators import CredentialLister, NodeResolver, Store
from workload_pipeline.core.document import to_str
from workload_pipeline.core.errors import InvalidType
from workload_pipeline.workload.constants import WORKLOAD_KINDS
from workload_pipeline.workload.credentials import set_image_pull_secrets
from workload_pipeline.workload.defaults import set_workload_defaults
from workload_pipeline.workload.ports import set_ports
from workload_pipeline.workload.scheduling import set_scheduling
from workload_pipeline.workload.selector import set_selector
from workload_pipeline.workload.strategy import set_strategy
from workload_pipeline.workload.utils import split_type_and_id

logger = logging.getLogger(__name__)

_KINDS = {kind.lower(): kind for kind in WORKLOAD_KINDS}


def canonical_kind(kind: str) -> str:
    """Return the canonical spelling of a workload kind.

    Raises:
        InvalidType: If ``kind`` is not one of WORKLOAD_KINDS
    """
    try:
        return _KINDS[kind.lower()]
    except KeyError:
        raise InvalidType(f"Unknown workload kind: {kind}") from None


class CustomizeStore:
    """Store wrapper that normalizes workload documents in flight.

    Holds no per-request state; one instance can serve concurrent callers as
    long as each call owns its document.

    Attributes:
        store: Underlying persistence
        credentials: Credential lookup used for image pull secrets
        nodes: Node lookup used for pinned scheduling

    Example:
        >>> from workload_pipeline.workload.memory import (
        ...     InMemoryStore, StaticCredentialLister, StaticNodeResolver)
        >>> store = CustomizeStore(InMemoryStore(), StaticCredentialLister(), StaticNodeResolver())
        >>> doc = store.create("deployment", {"name": "web", "namespaceId": "default"})
        >>> doc["selector"]["matchLabels"]
        {'workload.user.cattle.io/workloadselector': 'deployment-default-web'}
    """

    def __init__(self, store: Store, credentials: CredentialLister, nodes: NodeResolver):
        self.store = store
        self.credentials = credentials
        self.nodes = nodes

    def create(self, kind: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize a new workload and persist it.

        Raises:
            InvalidType: If ``kind`` is not a workload kind
            InvalidOption: If two ports of one container share a name
        """
        kind = canonical_kind(kind)
        logger.debug(f"Creating {kind} {document.get('name')}")

        set_selector(kind, document)
        set_workload_defaults(kind, document)
        set_image_pull_secrets(self.credentials, document)
        set_ports(to_str(document.get("name")), document)
        set_scheduling(self.nodes, document)
        set_strategy(document)
        return self.store.create(kind, document)

    def update(self, kind: str, identifier: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize an updated workload and persist it under ``identifier``.

        The workload name used for DNS names is the second colon-delimited
        segment of ``identifier``.

        Raises:
            InvalidType: If ``kind`` is not a workload kind
            InvalidOption: If two ports of one container share a name
        """
        kind = canonical_kind(kind)
        _, name = split_type_and_id(identifier)
        logger.debug(f"Updating {kind} {identifier}")

        set_ports(name, document)
        set_scheduling(self.nodes, document)
        set_strategy(document)
        return self.store.update(kind, identifier, document)

    def by_id(self, kind: str, identifier: str) -> Dict[str, Any]:
        """Read a workload, reducing aggregate identifiers to their short id."""
        kind = canonical_kind(kind)
        short_id = identifier
        if identifier.count(":") > 1:
            _, short_id = split_type_and_id(identifier)
        return self.store.by_id(kind, short_id)

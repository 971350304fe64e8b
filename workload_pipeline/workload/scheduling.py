"""Scheduling state codec.

When a workload is pinned to a node, the API layer receives the external node
identifier (``<cluster>:<machine>``) but the document must carry the node's
internal name. The mapping back is kept in a JSON annotation so the original
identifier can be recovered when the workload is read:

    annotations:
      workload.cattle.io/state: '{"bm9kZS0x": "c-abc:m-123"}'

Keys are the URL-safe base64 of the node name.
"""

import base64
import json
import logging
from typing import Any, Dict

from workload_pipeline.core.collaborators import NodeResolver
from workload_pipeline.core.document import get_value, get_value_n, put_value, to_str
from workload_pipeline.workload.constants import STATE_ANNOTATION

logger = logging.getLogger(__name__)


def state_key(node_name: str) -> str:
    """Annotation key recording the pin to ``node_name``."""
    return base64.urlsafe_b64encode(node_name.encode("utf-8")).decode("ascii")


def decode_state(document: Dict[str, Any]) -> Dict[str, str]:
    """Read the scheduling state annotation.

    Missing, malformed or too deeply nested JSON yields an empty mapping.
    """
    value, found = get_value(document, "annotations", STATE_ANNOTATION)
    if not found:
        return {}
    try:
        state = json.loads(to_str(value))
    except (ValueError, RecursionError) as e:
        logger.debug(f"Ignoring malformed scheduling state on workload {document.get('id')}: {e}")
        return {}
    if not isinstance(state, dict):
        return {}
    return {to_str(k): to_str(v) for k, v in state.items()}


def encode_state(document: Dict[str, Any], state: Dict[str, str]) -> None:
    """Write ``state`` back into the annotation.

    Values are expected to be strings; a caller passing anything JSON cannot
    encode gets the failure logged and the annotation left untouched.
    """
    try:
        content = json.dumps(state, sort_keys=True)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to save state on workload {document.get('id')}: {e}")
        return
    put_value(document, content, "annotations", STATE_ANNOTATION)


def get_node_name(resolver: NodeResolver, node_id: str) -> str:
    """Resolve a node identifier, returning "" when the lookup fails."""
    try:
        return to_str(resolver.resolve_node_name(node_id))
    except Exception as e:
        logger.warning(f"Failed to resolve node {node_id}: {e}")
        return ""


def set_scheduling(resolver: NodeResolver, document: Dict[str, Any]) -> None:
    """Rewrite a pinned node identifier to the node name and record the pin.

    Without a pin, the top-level ``nodeId`` is cleared. A pin whose node
    cannot be resolved is left as submitted.

    Args:
        resolver: Node lookup collaborator
        document: Workload document, modified in place
    """
    node_id = to_str(get_value_n(document, "scheduling", "node", "nodeId"))
    if not node_id:
        put_value(document, "", "nodeId")
        return

    node_name = get_node_name(resolver, node_id)
    if not node_name:
        return
    put_value(document, node_name, "scheduling", "node", "nodeId")
    state = decode_state(document)
    state[state_key(node_name)] = node_id
    encode_state(document, state)

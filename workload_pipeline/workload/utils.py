"""Shared helpers for the workload mutation passes."""

from typing import Any, Dict, List, Tuple

from workload_pipeline.core.document import get_slice, to_str
from workload_pipeline.workload.constants import JOB_KINDS


def get_containers(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Extract the container mappings of a workload document.

    Args:
        document: Workload document

    Returns:
        List of container dicts, empty list if not found
    """
    return get_slice(document, "containers")


def is_job_kind(kind: str) -> bool:
    """True for ``job`` and ``cronJob``, compared case-insensitively."""
    return kind.lower() in JOB_KINDS


def resolve_workload_id(kind: str, document: Dict[str, Any]) -> str:
    """Canonical identifier of a workload, used as the selector label value.

    Example:
        >>> resolve_workload_id("deployment", {"namespaceId": "default", "name": "web"})
        'deployment-default-web'
    """
    return "-".join([
        kind.lower(),
        to_str(document.get("namespaceId")),
        to_str(document.get("name")),
    ])


def split_type_and_id(identifier: str) -> Tuple[str, str]:
    """Split a composite ``<type>:<id>[:...]`` identifier.

    Returns the leading type and the second segment. Identifiers without a
    colon have no type.

    Example:
        >>> split_type_and_id("deployment:web:extra")
        ('deployment', 'web')
    """
    parts = identifier.split(":")
    if len(parts) < 2:
        return "", identifier
    return parts[0], parts[1]

"""Selector assignment for workloads created without one."""

from typing import Any, Dict

from workload_pipeline.core.document import is_empty, to_map
from workload_pipeline.workload.constants import SELECTOR_LABEL
from workload_pipeline.workload.utils import is_job_kind, resolve_workload_id


def _merge_label(document: Dict[str, Any], field: str, value: str) -> None:
    labels = to_map(document.get(field))
    if labels is None:
        labels = {}
    labels[SELECTOR_LABEL] = value
    document[field] = labels


def set_selector(kind: str, document: Dict[str, Any]) -> None:
    """Give a non-job workload a selector keyed on its canonical identifier.

    Sets ``selector.matchLabels``, ``workloadLabels`` and ``labels`` so the
    generated selector matches the workload's own pods. Existing label maps
    are merged into; a document that already has a selector is left alone.

    Args:
        kind: Concrete workload kind (``deployment``, ``job``, ...)
        document: Workload document, modified in place
    """
    if is_job_kind(kind) or not is_empty(document.get("selector")):
        return

    workload_id = resolve_workload_id(kind, document)
    document["selector"] = {
        "matchLabels": {
            SELECTOR_LABEL: workload_id,
        },
    }
    _merge_label(document, "workloadLabels", workload_id)
    _merge_label(document, "labels", workload_id)

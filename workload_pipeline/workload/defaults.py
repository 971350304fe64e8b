"""Kind-specific defaults."""

from typing import Any, Dict

from workload_pipeline.workload.utils import is_job_kind


def set_workload_defaults(kind: str, document: Dict[str, Any]) -> None:
    """Jobs restart on failure unless told otherwise."""
    if is_job_kind(kind) and "restartPolicy" not in document:
        document["restartPolicy"] = "OnFailure"

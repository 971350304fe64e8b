"""Rollout strategy cleanup."""

from typing import Any, Dict

from workload_pipeline.core.document import get_value, remove_value, to_str


def set_strategy(document: Dict[str, Any]) -> None:
    """Drop surge/unavailability settings from a Recreate deployment config.

    ``maxSurge`` and ``maxUnavailable`` only apply to rolling updates and must
    not be persisted alongside ``strategy: Recreate``.
    """
    strategy, found = get_value(document, "deploymentConfig", "strategy")
    if found and to_str(strategy) == "Recreate":
        remove_value(document, "deploymentConfig", "maxSurge")
        remove_value(document, "deploymentConfig", "maxUnavailable")

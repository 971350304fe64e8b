"""
workload-pipeline: request-time normalization for container workloads

Rewrites untyped workload documents (deployments, jobs, daemon sets, ...)
before they are persisted: deterministic label selectors, unique port names,
resolved image-pull credentials, a sane rollout strategy, and an encoded
record of pinned scheduling decisions.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]

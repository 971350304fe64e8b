"""Workload mutation passes.

This package holds the passes applied to a workload document before it is
persisted, and the store that sequences them:
- selector: deterministic label selector and matching labels
- defaults: kind-specific defaults (job restart policy)
- credentials: image-pull secrets resolved from registry credentials
- ports: port naming, uniqueness and DNS names
- scheduling: pinned-node state annotation
- strategy: rollout strategy cleanup
- store: CustomizeStore orchestrating the passes around a Store
"""

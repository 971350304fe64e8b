"""
Core kind-agnostic components for the workload pipeline.

This package contains the document accessors, collaborator protocols,
error types and configuration loading shared by every mutation pass.
"""

__all__ = []

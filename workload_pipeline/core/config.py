"""Pipeline settings read by the command-line entrypoint.

Settings live in the ``pipeline`` section of config.json::

    {
      "pipeline": {
        "log_level": "INFO",
        "credentials_file": "fixtures/credentials.yaml",
        "nodes_file": "fixtures/nodes.yaml"
      }
    }

A key missing from the file falls back to ``PIPELINE_<KEY>`` in the
environment (e.g. PIPELINE_NODES_FILE), then to the field default.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

SECTION = "pipeline"
ENV_PREFIX = "PIPELINE_"


@dataclass(frozen=True)
class PipelineSettings:
    """Typed view of the ``pipeline`` config section.

    Attributes:
        log_level: Logging level name used when the CLI is not verbose
        credentials_file: YAML fixture with registry credentials, if any
        nodes_file: YAML fixture mapping node ids to node names, if any
    """

    log_level: str = "WARNING"
    credentials_file: Optional[str] = None
    nodes_file: Optional[str] = None

    @property
    def logging_level(self) -> int:
        """Numeric level for ``log_level``; unknown names mean WARNING."""
        level = getattr(logging, self.log_level.upper(), None)
        if isinstance(level, int):
            return level
        return logging.WARNING


def _read_section(config_path: str) -> Dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            loaded = json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}

    if not isinstance(loaded, dict) or not isinstance(loaded.get(SECTION), dict):
        return {}
    return loaded[SECTION]


def load_settings(
    config_path: str = "config.json", environ: Optional[Mapping[str, str]] = None
) -> PipelineSettings:
    """Build PipelineSettings from config.json and the environment.

    A missing or unreadable file is treated as an empty section.

    Args:
        config_path: Path to config.json (default: "config.json")
        environ: Environment to fall back to (default: os.environ)

    Returns:
        PipelineSettings with every field resolved
    """
    section = _read_section(config_path)
    if environ is None:
        environ = os.environ

    values = {}
    for f in fields(PipelineSettings):
        value = section.get(f.name)
        if value is None:
            value = environ.get(ENV_PREFIX + f.name.upper())
        if value is not None:
            values[f.name] = str(value)
    return PipelineSettings(**values)

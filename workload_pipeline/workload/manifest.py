"""YAML I/O for workload documents and collaborator fixtures.

Uses ruamel.yaml round-trip loading so comments and key order of a workload
document survive the pipeline.
"""

from io import StringIO
from pathlib import Path
from typing import Any, Dict, List

from ruamel.yaml import YAML

from workload_pipeline.core.collaborators import CredentialRecord
from workload_pipeline.core.document import to_map, to_str


def _create_yaml_instance() -> YAML:
    """Create configured ruamel.yaml instance for workload documents.

    Returns:
        YAML instance configured to:
        - Preserve quotes and formatting
        - Not wrap long strings (prevents image field splitting)
        - Use block style (not flow style)
    """
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def load_document(file_path: str) -> Dict[str, Any]:
    """Load a workload document from a YAML file.

    Raises:
        ValueError: If the file does not hold a mapping
    """
    content = Path(file_path).read_text(encoding="utf-8")
    document = _create_yaml_instance().load(content)
    if not isinstance(document, dict):
        raise ValueError(f"{file_path} does not contain a workload document")
    return document


def dump_document(document: Dict[str, Any]) -> str:
    """Render a workload document as YAML."""
    stream = StringIO()
    _create_yaml_instance().dump(document, stream)
    return stream.getvalue()


def _load_mapping(file_path: str) -> Dict[str, Any]:
    content = Path(file_path).read_text(encoding="utf-8")
    return to_map(_create_yaml_instance().load(content)) or {}


def load_credentials(file_path: str) -> List[CredentialRecord]:
    """Load credential records from a YAML fixture.

    Expected layout::

        credentials:
        - name: quay-pull
          namespaceId: default      # omit for project-wide credentials
          registries:
            quay.io: {username: bot}
    """
    records = []
    for entry in _load_mapping(file_path).get("credentials") or []:
        entry = to_map(entry)
        if entry is None:
            continue
        namespace_id = entry.get("namespaceId")
        records.append(CredentialRecord(
            name=to_str(entry.get("name")),
            registries=dict(to_map(entry.get("registries")) or {}),
            namespace_id=to_str(namespace_id) if namespace_id is not None else None,
        ))
    return records


def load_nodes(file_path: str) -> Dict[str, str]:
    """Load a node-id -> node-name mapping from the ``nodes`` key of a YAML fixture."""
    nodes = to_map(_load_mapping(file_path).get("nodes")) or {}
    return {to_str(k): to_str(v) for k, v in nodes.items()}

"""Port naming, uniqueness validation and DNS names.

Every container port gets a name that is unique within its container. Names
the user left empty are derived from the port itself as

    <containerPort><protocol><sourcePort><kindCode>

with no separators and the service kind compressed to one digit
(NodePort=1, ClusterIP=2, LoadBalancer=3, anything else 0). Service names are
derived from port names and are limited to 15 characters, which rules out
anything longer.
"""

import logging
from typing import Any, Dict, List, Tuple

from workload_pipeline.core.document import get_value, is_empty, to_number, to_str
from workload_pipeline.core.errors import InvalidOption
from workload_pipeline.workload.constants import PORT_KIND_CODES
from workload_pipeline.workload.utils import get_containers

logger = logging.getLogger(__name__)


def kind_code(kind: Any) -> int:
    """Single-digit code for a port's service kind."""
    return PORT_KIND_CODES.get(to_str(kind), 0)


def port_name(port: Dict[str, Any]) -> str:
    """Name a port keeps or is given.

    A non-empty ``name`` is used as-is. Otherwise the name is derived from
    ``containerPort``, ``protocol``, ``sourcePort`` and ``kind``. A
    ``containerPort`` that is not a number counts as 0.

    Example:
        >>> port_name({"containerPort": 8080, "protocol": "TCP"})
        '8080tcp0'
        >>> port_name({"containerPort": 80, "protocol": "TCP", "sourcePort": 30080, "kind": "NodePort"})
        '80tcp300801'
    """
    if not is_empty(port.get("name")):
        return to_str(port["name"])

    try:
        container_port = to_number(port.get("containerPort"))
    except ValueError as e:
        logger.warning(
            f"Failed to transform container port [{port.get('containerPort')}] to number: {e}"
        )
        container_port = 0

    return "".join([
        str(container_port),
        to_str(port.get("protocol")).lower(),
        to_str(port.get("sourcePort")).lower(),
        str(kind_code(port.get("kind"))),
    ])


def should_generate_dns_name(workload_name: str, dns_name: str) -> bool:
    """Whether a port's ``dnsName`` must be (re)derived.

    Empty names are always derived. Names that equal the workload name or
    start with ``<workload>-`` were derived before and are re-derived, so a
    change of the port's kind is reflected. Any other name was chosen by the
    user and is kept.
    """
    if not dns_name:
        return True
    return dns_name.lower() == workload_name.lower() or dns_name.startswith(f"{workload_name}-")


def dns_name(workload_name: str, kind: Any) -> str:
    """DNS name for a port of the given kind.

    ClusterIP ports resolve through the workload name itself; every other kind
    gets ``<workload>-<kind>``.
    """
    name = workload_name.lower()
    if to_str(kind) == "ClusterIP":
        return name
    return f"{name}-{to_str(kind).lower()}"


def _named_ports(ports: List[Any]) -> List[Tuple[Dict[str, Any], str]]:
    used = set()
    named = []
    for port in ports:
        if not isinstance(port, dict):
            logger.warning(f"Failed to transform port to map: {port!r}")
            continue
        name = port_name(port)
        if name in used:
            raise InvalidOption(
                f"Duplicated port kind={port.get('kind')}, "
                f"containerPort={port.get('containerPort')}, protocol={port.get('protocol')}",
                kind=port.get("kind"),
                container_port=port.get("containerPort"),
                protocol=port.get("protocol"),
            )
        used.add(name)
        named.append((port, name))
    return named


def set_ports(workload_name: str, document: Dict[str, Any]) -> None:
    """Name, validate and assign DNS names to every container port.

    Each container is handled independently; names only have to be unique
    within one container. A container's ports are validated before any of
    them is modified.

    Args:
        workload_name: Short name of the workload, input for DNS names
        document: Workload document, modified in place

    Raises:
        InvalidOption: If two ports of one container end up with the same name
    """
    for container in get_containers(document):
        ports, found = get_value(container, "ports")
        if not found or not isinstance(ports, list):
            continue

        for port, name in _named_ports(ports):
            port["name"] = name
            if should_generate_dns_name(workload_name, to_str(port.get("dnsName"))):
                port["dnsName"] = dns_name(workload_name, port.get("kind"))

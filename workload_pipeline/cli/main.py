"""workload-pipeline CLI - run the mutation passes over workload YAML.

This module provides the command-line entrypoint, mostly useful to preview
what the API layer would persist for a given document.
"""

import argparse
import logging
import sys
from pathlib import Path

from workload_pipeline.core.config import load_settings
from workload_pipeline.core.errors import APIError
from workload_pipeline.workload.manifest import (
    dump_document,
    load_credentials,
    load_document,
    load_nodes,
)
from workload_pipeline.workload.memory import (
    InMemoryStore,
    StaticCredentialLister,
    StaticNodeResolver,
)
from workload_pipeline.workload.ports import port_name
from workload_pipeline.workload.store import CustomizeStore
from workload_pipeline.workload.utils import split_type_and_id

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="workload-pipeline",
        description="Normalize container workload documents before persistence",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview a new deployment
  workload-pipeline mutate web.yaml --kind deployment

  # With registry credentials and node pins
  workload-pipeline mutate web.yaml --kind deployment --credentials creds.yaml --nodes nodes.yaml

  # Preview an update of an existing workload
  workload-pipeline mutate web.yaml --kind deployment --id deployment:web

  # Show the generated name of a port
  workload-pipeline port-name --container-port 8080 --protocol TCP --kind NodePort
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    mutate_parser = subparsers.add_parser(
        "mutate",
        help="Run the mutation passes over a workload document"
    )
    mutate_parser.add_argument("input", help="Path to workload YAML")
    mutate_parser.add_argument(
        "--kind",
        required=True,
        help="Workload kind (deployment, statefulSet, job, ...)"
    )
    mutate_parser.add_argument(
        "--id",
        help="Run as an update of this identifier (e.g. deployment:web)"
    )
    mutate_parser.add_argument(
        "--credentials",
        default=None,
        help="YAML file with registry credentials (default: from config.json)"
    )
    mutate_parser.add_argument(
        "--nodes",
        default=None,
        help="YAML file mapping node ids to node names (default: from config.json)"
    )
    mutate_parser.add_argument("--out", help="Write the result here instead of stdout")
    mutate_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    port_parser = subparsers.add_parser("port-name", help="Print the generated name of a port")
    port_parser.add_argument("--container-port", required=True)
    port_parser.add_argument("--protocol", default="TCP")
    port_parser.add_argument("--source-port", default="")
    port_parser.add_argument("--kind", default="")

    args = parser.parse_args(argv)
    settings = load_settings()

    if getattr(args, "verbose", False):
        level = logging.INFO
    else:
        level = settings.logging_level
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    if args.command == "mutate":
        return cmd_mutate(args, settings)
    elif args.command == "port-name":
        return cmd_port_name(args)
    else:
        parser.print_help()
        return 1


def cmd_mutate(args, settings):
    """Handle mutate command."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    credentials_file = args.credentials or settings.credentials_file
    nodes_file = args.nodes or settings.nodes_file

    try:
        document = load_document(str(input_path))
        records = load_credentials(credentials_file) if credentials_file else []
        nodes = load_nodes(nodes_file) if nodes_file else {}

        backing = InMemoryStore()
        store = CustomizeStore(backing, StaticCredentialLister(records), StaticNodeResolver(nodes))

        if args.id:
            # Seed the backing store so the update has something to replace
            _, name = split_type_and_id(args.id)
            backing.create(args.kind, {"id": name, "name": name})
            result = store.update(args.kind, args.id, document)
        else:
            result = store.create(args.kind, document)
    except APIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.exception("Mutation failed")
        return 1

    output = dump_document(result)
    if args.out:
        Path(args.out).write_text(output, encoding="utf-8")
        logger.info(f"Wrote mutated workload to {args.out}")
    else:
        sys.stdout.write(output)
    return 0


def cmd_port_name(args):
    """Handle port-name command."""
    print(port_name({
        "containerPort": args.container_port,
        "protocol": args.protocol,
        "sourcePort": args.source_port,
        "kind": args.kind,
    }))
    return 0


if __name__ == "__main__":
    sys.exit(main())

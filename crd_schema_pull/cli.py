"""Command line entry point: ``crd-schema-pull``."""

import argparse
import logging
import sys
from typing import List, Optional

from crd_schema_pull import __version__
from crd_schema_pull.errors import PullError
from crd_schema_pull.k8s_config import SCHEMA_ROOT_ENV, get_api_client, get_schema_root
from crd_schema_pull.pull import pull_schemas

logger = logging.getLogger("crd-schema-pull")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crd-schema-pull",
        description=(
            "Download the CRD schemas of the current cluster as JSON Schema "
            "files for offline linting."
        ),
    )
    parser.add_argument(
        "--context",
        default="",
        help="Kubernetes context (uses current if not specified)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=(
            f"Schema root directory (default: ${SCHEMA_ROOT_ENV} or "
            "~/.ytt-lint/schema/k8s)"
        ),
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(message)s")

    try:
        schema_root = get_schema_root(args.output)
        api_client = get_api_client(args.context)
        written = pull_schemas(api_client, schema_root)
    except PullError as e:
        logger.error(f"Error pulling CRD schemas: {e}")
        return 1

    logger.info(f"Wrote {len(written)} schemas to {schema_root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

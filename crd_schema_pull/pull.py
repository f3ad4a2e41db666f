"""Pull every CRD schema from a cluster into the local schema tree."""

import logging
from pathlib import Path
from typing import List

from kubernetes import client

from crd_schema_pull.generations import select_generation
from crd_schema_pull.metadata_template import load_metadata_template
from crd_schema_pull.normalize import normalize_schema
from crd_schema_pull.writer import write_schema

logger = logging.getLogger("crd-schema-pull")


def pull_schemas(
    api_client: client.ApiClient,
    schema_root: Path,
    log: logging.Logger = logger,
) -> List[Path]:
    """Write one JSON Schema per CRD version below ``schema_root``.

    CRDs and their versions are processed in the order the API server
    returns them. Versions without a schema are skipped; the first fatal
    error stops the run and leaves already written files in place.

    Returns:
        The written paths, in write order.
    """
    generation, crds = select_generation(api_client, log=log)
    metadata_template = load_metadata_template()
    string_property = generation.string_property()

    written: List[Path] = []
    for crd in crds:
        kind = generation.kind(crd)
        group = generation.group(crd)

        for version in generation.versions(crd):
            version_name = generation.version_name(version)
            schema = generation.version_schema(version)
            if schema is None:
                schema = generation.fallback_schema(crd)
            if schema is None:
                if generation.reports_missing_schema:
                    log.warning(
                        f"{kind} version {version_name} of group {group} "
                        "does not contain a schema and will be skipped."
                    )
                continue

            normalized = normalize_schema(schema, metadata_template, string_property)
            written.append(
                write_schema(schema_root, group, version_name, kind, normalized, log=log)
            )

    log.debug(f"{generation.name}: wrote {len(written)} schemas from {len(crds)} CRDs")
    return written

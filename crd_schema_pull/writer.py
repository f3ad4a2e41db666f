"""Write normalized schemas to ``<root>/<group>/<version>/<kind>.json``."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from crd_schema_pull.errors import SchemaWriteError

logger = logging.getLogger("crd-schema-pull")

# Files and directories are created world-writable, minus the umask.
FILE_MODE = 0o777


def schema_path(root: Path, group: str, version: str, kind: str) -> Path:
    return Path(root) / group / version / f"{kind.lower()}.json"


def serialize_schema(schema: Dict[str, Any]) -> str:
    """Compact JSON with sorted keys, identical for identical schemas."""
    try:
        return json.dumps(schema, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SchemaWriteError("json.dumps", e) from e


def write_schema(
    root: Path,
    group: str,
    version: str,
    kind: str,
    schema: Dict[str, Any],
    log: logging.Logger = logger,
) -> Path:
    """Serialize ``schema`` to its derived path, replacing any existing file.

    Returns:
        The path that was written.

    Raises:
        SchemaWriteError: if the directory, the JSON or the file write fails.
    """
    filename = schema_path(root, group, version, kind)
    try:
        os.makedirs(filename.parent, mode=FILE_MODE, exist_ok=True)
    except OSError as e:
        raise SchemaWriteError("os.makedirs", e) from e

    data = serialize_schema(schema)

    log.info(f"Writing schema for {kind} version {version} of group {group} to {filename}")
    try:
        fd = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
    except OSError as e:
        raise SchemaWriteError("write", e) from e
    return filename

"""Patch CRD schemas so they describe the full object envelope."""

import copy
from typing import Any, Dict


def normalize_schema(
    schema: Dict[str, Any],
    metadata_template: Dict[str, Any],
    string_property: Dict[str, Any],
) -> Dict[str, Any]:
    """Return a self-contained copy of ``schema`` with envelope fields.

    ``properties.metadata`` is always replaced by a copy of
    ``metadata_template``, whatever the CRD declared. ``kind`` and
    ``apiVersion`` get ``string_property`` only when the CRD leaves them out.
    Neither ``schema`` nor ``metadata_template`` is modified.
    """
    patched = copy.deepcopy(schema)
    properties = patched.get("properties")
    if properties is None:
        properties = patched["properties"] = {}

    properties["metadata"] = copy.deepcopy(metadata_template)
    for field in ("kind", "apiVersion"):
        if field not in properties:
            properties[field] = copy.deepcopy(string_property)
    return patched

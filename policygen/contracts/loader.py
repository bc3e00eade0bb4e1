"""
Loader — top-level validation of a parsed surface document.

Checks run in a fixed order: object shape, schema tag, entries array.
No entry is inspected here.
"""

import logging
from typing import Any

from .errors import InvalidDocument, MissingEntries, SchemaMismatch
from .schema import SURFACE_SCHEMA, SurfaceDocument

logger = logging.getLogger(__name__)


def json_type_name(value: Any) -> str:
    """JSON-flavoured type name for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def load_surface_document(value: Any) -> SurfaceDocument:
    """
    Validate a parsed JSON value as a surface document.

    Raises:
        InvalidDocument: value is not a JSON object
        SchemaMismatch: `schema` is not SURFACE_SCHEMA
        MissingEntries: `entries` is absent or not an array
    """
    if not isinstance(value, dict):
        raise InvalidDocument(json_type_name(value))

    schema_tag = value.get("schema")
    if schema_tag != SURFACE_SCHEMA:
        raise SchemaMismatch(SURFACE_SCHEMA, schema_tag)

    entries = value.get("entries")
    if not isinstance(entries, (list, tuple)):
        raise MissingEntries(
            f"missing entries array (got {json_type_name(entries)})"
            if "entries" in value
            else "missing entries array"
        )

    logger.debug("Surface document accepted", extra={"entry_count": len(entries)})
    return SurfaceDocument(schema=schema_tag, entries=list(entries))

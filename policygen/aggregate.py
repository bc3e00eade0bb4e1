"""
Entry Aggregator — collapses surface entries into per-module export sets.

Set insertion is commutative, so the result does not depend on entry order.
Ordering is imposed later by the canonicalizer, never here.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from .contracts.errors import MalformedEntry
from .contracts.loader import json_type_name
from .contracts.schema import SurfaceEntry

logger = logging.getLogger(__name__)

ModuleExportSet = dict[str, set[str]]


def parse_entry(index: int, raw: Any) -> SurfaceEntry:
    """
    Validate one raw entry.

    Raises:
        MalformedEntry: entry is not an object, or module/export are not strings
    """
    if not isinstance(raw, dict):
        raise MalformedEntry(index, f"entry must be an object, got {json_type_name(raw)}")
    try:
        return SurfaceEntry.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "entry"
        raise MalformedEntry(index, f"{field}: {first['msg']}") from e


def aggregate_entries(entries: Iterable[Any]) -> ModuleExportSet:
    """
    Group entries by module, collapsing duplicate exports.

    Every entry is shape-checked before it is inserted; the first malformed
    entry aborts aggregation.
    """
    module_exports: ModuleExportSet = {}
    count = 0
    for index, raw in enumerate(entries):
        entry = parse_entry(index, raw)
        module_exports.setdefault(entry.module, set()).add(entry.export)
        count += 1

    logger.debug(
        "Aggregated surface entries",
        extra={"entry_count": count, "module_count": len(module_exports)},
    )
    return module_exports

"""
Canonicalizer — deterministic ordering and serialisation.

Module keys and export names are sorted by code point. The JSON rendering
is compact: no whitespace, no trailing newline, non-ASCII kept as UTF-8.
"""

import json
import re
from collections.abc import Collection, Mapping, Sequence
from typing import Any


def canonicalize_modules(
    module_exports: Mapping[str, Collection[str]],
    restrict_to: Sequence[str] | None = None,
) -> dict[str, list[str]]:
    """
    Produce the ordered module mapping for the policy document.

    Args:
        module_exports: Aggregated module -> exports
        restrict_to: If given, only these modules are emitted. Every one of
            them must be present in `module_exports` (the enforcer guarantees
            this on the strict path).

    Returns:
        Dict whose keys are in ascending order, each mapped to a strictly
        ascending, duplicate-free export list.
    """
    keys = module_exports.keys() if restrict_to is None else set(restrict_to)
    return {module: sorted(set(module_exports[module])) for module in sorted(keys)}


# Lone surrogates survive json.loads but cannot be encoded as UTF-8
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def _escape_surrogate(match: re.Match) -> str:
    return f"\\u{ord(match.group()):04x}"


def render_canonical_json(value: Any) -> str:
    """
    Compact JSON with insertion-ordered keys.

    Lone surrogates are written as lowercase \\uXXXX escapes, so the result
    always encodes as UTF-8.
    """
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return _LONE_SURROGATE.sub(_escape_surrogate, text)

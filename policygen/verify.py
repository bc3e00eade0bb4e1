"""
Verify — drift checks for a committed policy document.

A committed allow-list must be exactly what the generator would write today.
These checks prove it from the bytes on disk rather than trusting that the
generator "ran once":

1. Canonical form (compact single line, frozen key order, sorted modules
   and exports, no duplicates, no empty export lists)
2. Surface alignment (every module and export exists in the surface,
   `source` names the surface path)
3. Module restriction (strict variant: only required modules, all covered)
4. Regeneration (byte-identical to a fresh in-memory compilation)

Unlike the compile path, checks here collect every violation so a drifted
file can be fixed in one pass.
"""

import hashlib
import json
import logging
import os
from collections.abc import Collection, Mapping
from pathlib import Path
from typing import Any

from .aggregate import aggregate_entries
from .canon import render_canonical_json
from .contracts.errors import PolicyDriftError
from .contracts.loader import load_surface_document
from .contracts.required import find_required_module_violations
from .contracts.schema import POLICY_SCHEMA
from .emit import render_policy_document
from .pipeline import PERMISSIVE, PipelineVariant, compile_policy, read_surface_file

logger = logging.getLogger(__name__)

TOP_LEVEL_KEYS = ["schema", "source", "modules"]


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _is_strictly_ascending(values: list[str]) -> bool:
    return all(a < b for a, b in zip(values, values[1:]))


def _string_list_modules(modules: Mapping[str, Any]) -> dict[str, list[str]]:
    """Modules whose exports are a list of strings. Others are reported by check_policy_bytes."""
    return {
        module: exports
        for module, exports in modules.items()
        if isinstance(exports, list) and all(isinstance(x, str) for x in exports)
    }


# =============================================================================
# CHECKS
# =============================================================================


def check_policy_bytes(raw: bytes) -> list[str]:
    """
    Check that raw bytes are a canonical policy document.

    Returns:
        List of violation messages. Empty = canonical.
    """
    if not raw:
        return ["policy file is empty"]

    violations = []
    if any(ch in raw for ch in b"\n\r\t"):
        violations.append("policy file must be single-line JSON (found \\n, \\r or \\t)")
    if raw.endswith(b"\n"):
        violations.append("policy file must not end with a newline")

    try:
        policy = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        violations.append(f"policy file is not valid UTF-8 JSON: {e}")
        return violations

    if not isinstance(policy, dict):
        violations.append("policy document must be a JSON object")
        return violations

    keys = list(policy.keys())
    if keys != TOP_LEVEL_KEYS:
        violations.append(f"top-level keys must be exactly {TOP_LEVEL_KEYS} in order, got {keys}")

    if policy.get("schema") != POLICY_SCHEMA:
        violations.append(f"unexpected schema: {policy.get('schema')!r} (expected {POLICY_SCHEMA!r})")

    if not isinstance(policy.get("source"), str):
        violations.append("source must be a string")

    modules = policy.get("modules")
    if not isinstance(modules, dict):
        violations.append("modules must be an object")
    else:
        module_keys = list(modules.keys())
        if not _is_strictly_ascending(module_keys):
            violations.append("module keys must be sorted ascending")
        for module, exports in modules.items():
            if not isinstance(exports, list) or not all(isinstance(x, str) for x in exports):
                violations.append(f"exports must be a list of strings for module {module}")
                continue
            if not exports:
                violations.append(f"empty export list for module {module}")
            elif not _is_strictly_ascending(exports):
                violations.append(
                    f"exports must be strictly increasing (sorted, no duplicates) for module {module}"
                )

    if render_canonical_json(policy).encode("utf-8") != raw:
        violations.append("policy file is not in compact canonical JSON form")

    return violations


def check_policy_against_surface(
    policy: Mapping[str, Any],
    module_exports: Mapping[str, Collection[str]],
    expected_source: str,
) -> list[str]:
    """Every policy module and export must exist in the surface."""
    violations = []
    modules = policy.get("modules")
    if isinstance(modules, dict):
        for module in modules:
            if module not in module_exports:
                violations.append(f"module not in surface: {module}")
        for module, exports in _string_list_modules(modules).items():
            surface_exports = module_exports.get(module)
            if surface_exports is None:
                continue
            for export in exports:
                if export not in surface_exports:
                    violations.append(f"export not in surface: module={module} export={export}")

    if policy.get("source") != expected_source:
        violations.append(
            f"source mismatch: {policy.get('source')!r} (expected {expected_source!r})"
        )
    return violations


def check_policy_modules_allowed(
    policy: Mapping[str, Any],
    allowed: Collection[str],
) -> list[str]:
    """Every policy module must be in the permitted set, and every permitted module covered."""
    modules = policy.get("modules")
    if not isinstance(modules, dict):
        return []
    violations = [
        f"module not permitted in allow-list: {module}"
        for module in modules
        if module not in allowed
    ]
    listed = _string_list_modules(modules)
    # Malformed modules are present, just not countable
    required = [m for m in allowed if m in listed or m not in modules]
    violations.extend(str(v) for v in find_required_module_violations(listed, required))
    return violations


def check_generated_matches(committed: bytes, generated: bytes) -> list[str]:
    """Committed bytes must equal freshly generated bytes."""
    if committed == generated:
        return []
    return [
        "policy file differs from generator output "
        f"(sha256 committed={sha256_hex(committed)} generated={sha256_hex(generated)})"
    ]


# =============================================================================
# ENFORCEMENT
# =============================================================================


def verify_policy_file(
    source: str | os.PathLike,
    destination: str | os.PathLike,
    variant: PipelineVariant = PERMISSIVE,
) -> list[str]:
    """
    Run every check against the committed file at `destination`.

    The surface is compiled in memory; nothing is written. A surface that
    fails to compile raises its PolicyCompileError as usual.

    Returns:
        List of violation messages. Empty = committed file is current.
    """
    source_str = os.fspath(source)
    path = Path(destination)

    value = read_surface_file(source_str)
    generated = render_policy_document(compile_policy(value, source_str, variant))

    if not path.exists():
        return [f"{path} does not exist. Run the generator without --check."]

    try:
        committed = path.read_bytes()
    except OSError as e:
        return [f"cannot read policy file {path}: {e.strerror or e}"]
    violations = check_policy_bytes(committed)

    try:
        policy = json.loads(committed.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        policy = None

    if isinstance(policy, dict):
        module_exports = aggregate_entries(load_surface_document(value).entries)
        violations.extend(check_policy_against_surface(policy, module_exports, source_str))
        if variant.required_modules is not None:
            violations.extend(check_policy_modules_allowed(policy, variant.required_modules))

    violations.extend(check_generated_matches(committed, generated))

    logger.debug(
        "Verified policy file",
        extra={"path": str(path), "variant": variant.name, "violation_count": len(violations)},
    )
    return violations


def enforce_policy_file_strict(
    source: str | os.PathLike,
    destination: str | os.PathLike,
    variant: PipelineVariant = PERMISSIVE,
) -> None:
    """
    Strict verification: raises with every violation listed.

    Raises:
        PolicyDriftError: committed file is stale or non-canonical
    """
    violations = verify_policy_file(source, destination, variant)
    if violations:
        raise PolicyDriftError(os.fspath(destination), violations)

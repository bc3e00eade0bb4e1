"""
Required-Module Enforcer — coverage gate for the strict (ANKA) policy.

The ANKA sandbox relies on exactly these modules being present in the
surface with at least one export each. Any gap fails the build.
"""

import logging
from collections.abc import Collection, Mapping, Sequence

from .errors import EmptyRequiredModule, MissingRequiredModule, PolicyCompileError

logger = logging.getLogger(__name__)

# Declared order is the enforcement order.
ANKA_REQUIRED_MODULES: tuple[str, ...] = (
    "std/hash",
    "std/bytes",
    "std/codec",
    "std/json",
    "std/str",
    "std/record",
    "std/list",
    "std/result",
    "std/option",
    "std/trace",
    "std/artifact",
    "std/time",
    "std/fs",
    "std/http",
)


def find_required_module_violations(
    module_exports: Mapping[str, Collection[str]],
    required: Sequence[str],
) -> list[PolicyCompileError]:
    """
    Check every required module. Returns violations in `required` order.

    Empty list = full coverage.
    """
    violations: list[PolicyCompileError] = []
    for module in required:
        exports = module_exports.get(module)
        if exports is None:
            violations.append(MissingRequiredModule(module))
        elif len(exports) == 0:
            violations.append(EmptyRequiredModule(module))
    return violations


def enforce_required_modules_strict(
    module_exports: Mapping[str, Collection[str]],
    required: Sequence[str],
) -> None:
    """
    Strict enforcement: raises the first violation in `required` order.

    Raises:
        MissingRequiredModule: module absent from the aggregation
        EmptyRequiredModule: module present with no exports
    """
    violations = find_required_module_violations(module_exports, required)
    if violations:
        raise violations[0]
    logger.debug("Required modules covered", extra={"required_count": len(required)})

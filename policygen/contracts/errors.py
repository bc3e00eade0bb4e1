"""
Error taxonomy for policy compilation.

Every error is fatal. The first violation aborts the run and nothing is
written.
"""

from typing import Any


class PolicyCompileError(Exception):
    """Base class for every failure that aborts a policy compilation."""

    pass


# =============================================================================
# LOADER
# =============================================================================


class InvalidDocument(PolicyCompileError):
    """Top-level surface value is not a JSON object."""

    def __init__(self, actual_type: str):
        self.actual_type = actual_type
        super().__init__(f"surface document must be a JSON object, got {actual_type}")


class SchemaMismatch(PolicyCompileError):
    """Surface `schema` tag is not the expected literal."""

    def __init__(self, expected: str, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(f"unexpected schema: {actual!r} (expected {expected!r})")


class MissingEntries(PolicyCompileError):
    """Surface `entries` field is absent or not an array."""

    pass


# =============================================================================
# AGGREGATOR
# =============================================================================


class MalformedEntry(PolicyCompileError):
    """An entry is not an object, or its module/export are not strings."""

    def __init__(self, index: int, detail: str):
        self.index = index
        self.detail = detail
        super().__init__(f"malformed entry at index {index}: {detail}")


# =============================================================================
# REQUIRED-MODULE ENFORCER
# =============================================================================


class MissingRequiredModule(PolicyCompileError):
    """A required module does not appear in the surface at all."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"required module missing from surface: {module}")


class EmptyRequiredModule(PolicyCompileError):
    """A required module appears in the surface with no exports."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"required module has empty exports in surface: {module}")


# =============================================================================
# I/O SHELL AND VERIFIER
# =============================================================================


class SurfaceReadError(PolicyCompileError):
    """Surface file could not be read."""

    pass


class SurfaceDecodeError(PolicyCompileError):
    """Surface file is not valid UTF-8 JSON."""

    pass


class PolicyWriteError(PolicyCompileError):
    """Policy file could not be written."""

    pass


class PolicyDriftError(PolicyCompileError):
    """Committed policy file does not match what the generator produces."""

    def __init__(self, path: str, violations: list[str]):
        self.path = path
        self.violations = violations
        super().__init__(
            f"Policy check failed for {path} with {len(violations)} violation(s):\n"
            + "\n".join(f"  - {v}" for v in violations)
        )

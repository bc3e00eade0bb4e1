"""
Contracts Module — shape and coverage gates for policy compilation.

This module provides:
- schema.py: Pydantic models and frozen schema tags
- errors.py: The fatal error taxonomy
- loader.py: Top-level surface document validation
- required.py: Required-module coverage for the strict (ANKA) policy

Every gate fails fast. The generator never writes after a failed gate.
"""

from .errors import (
    EmptyRequiredModule,
    InvalidDocument,
    MalformedEntry,
    MissingEntries,
    MissingRequiredModule,
    PolicyCompileError,
    PolicyDriftError,
    PolicyWriteError,
    SchemaMismatch,
    SurfaceDecodeError,
    SurfaceReadError,
)
from .loader import load_surface_document
from .required import (
    ANKA_REQUIRED_MODULES,
    enforce_required_modules_strict,
    find_required_module_violations,
)
from .schema import (
    POLICY_SCHEMA,
    SURFACE_SCHEMA,
    PolicyDocument,
    SurfaceDocument,
    SurfaceEntry,
)

__all__ = [
    # Schema
    "SURFACE_SCHEMA",
    "POLICY_SCHEMA",
    "SurfaceEntry",
    "SurfaceDocument",
    "PolicyDocument",
    # Errors
    "PolicyCompileError",
    "InvalidDocument",
    "SchemaMismatch",
    "MissingEntries",
    "MalformedEntry",
    "MissingRequiredModule",
    "EmptyRequiredModule",
    "SurfaceReadError",
    "SurfaceDecodeError",
    "PolicyDriftError",
    "PolicyWriteError",
    # Loader
    "load_surface_document",
    # Required modules
    "ANKA_REQUIRED_MODULES",
    "find_required_module_violations",
    "enforce_required_modules_strict",
]

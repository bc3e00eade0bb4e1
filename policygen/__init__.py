# FARD stdlib policy generator
"""
Compiles the stdlib surface document into the canonical allow-list policy.

Exports for the CLI and other consumers.
"""

from .aggregate import aggregate_entries
from .canon import canonicalize_modules, render_canonical_json
from .contracts import (
    ANKA_REQUIRED_MODULES,
    POLICY_SCHEMA,
    SURFACE_SCHEMA,
    PolicyCompileError,
    PolicyDocument,
    load_surface_document,
)
from .emit import build_policy_document, render_policy_document, write_policy_document
from .pipeline import (
    PERMISSIVE,
    STRICT,
    PipelineVariant,
    compile_policy,
    compile_policy_file,
)
from .verify import enforce_policy_file_strict, verify_policy_file

__all__ = [
    "SURFACE_SCHEMA",
    "POLICY_SCHEMA",
    "ANKA_REQUIRED_MODULES",
    "PolicyDocument",
    "PolicyCompileError",
    "PipelineVariant",
    "PERMISSIVE",
    "STRICT",
    "load_surface_document",
    "aggregate_entries",
    "canonicalize_modules",
    "render_canonical_json",
    "build_policy_document",
    "render_policy_document",
    "write_policy_document",
    "compile_policy",
    "compile_policy_file",
    "verify_policy_file",
    "enforce_policy_file_strict",
]

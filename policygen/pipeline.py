"""
Policy compilation pipeline.

Loader -> Aggregator -> Enforcer (strict only) -> Canonicalizer -> Emitter.

The permissive and strict allow-lists are two configurations of this one
pipeline. They differ only in `required_modules`:

    PERMISSIVE: every module observed in the surface, no coverage gate
    STRICT:     exactly ANKA_REQUIRED_MODULES, each present and non-empty

Usage:
    from policygen.pipeline import STRICT, compile_policy_file

    document = compile_policy_file(src, dst, STRICT)
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .aggregate import aggregate_entries
from .canon import canonicalize_modules
from .contracts.errors import SurfaceDecodeError, SurfaceReadError
from .contracts.loader import load_surface_document
from .contracts.required import ANKA_REQUIRED_MODULES, enforce_required_modules_strict
from .contracts.schema import PolicyDocument
from .emit import build_policy_document, write_policy_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineVariant:
    """Named pipeline configuration."""

    name: str
    required_modules: tuple[str, ...] | None = None

    @property
    def is_strict(self) -> bool:
        return self.required_modules is not None


PERMISSIVE = PipelineVariant(name="permissive")
STRICT = PipelineVariant(name="strict", required_modules=ANKA_REQUIRED_MODULES)

VARIANTS: dict[str, PipelineVariant] = {v.name: v for v in (PERMISSIVE, STRICT)}


def get_variant(name: str) -> PipelineVariant:
    """Look up a variant by name. Raises ValueError for unknown names."""
    try:
        return VARIANTS[name]
    except KeyError:
        raise ValueError(
            f"unknown pipeline variant: {name!r} (expected one of {sorted(VARIANTS)})"
        ) from None


def compile_policy(
    value: Any,
    source: str,
    variant: PipelineVariant = PERMISSIVE,
) -> PolicyDocument:
    """
    Compile a parsed surface document into a policy document.

    Pure: no I/O. Raises the first PolicyCompileError encountered.

    Args:
        value: Parsed JSON value of the surface document
        source: Source path recorded verbatim in the output
        variant: PERMISSIVE or STRICT
    """
    surface = load_surface_document(value)
    module_exports = aggregate_entries(surface.entries)

    if variant.required_modules is not None:
        enforce_required_modules_strict(module_exports, variant.required_modules)

    modules = canonicalize_modules(module_exports, restrict_to=variant.required_modules)
    return build_policy_document(modules, source)


def read_surface_file(source: str | os.PathLike) -> Any:
    """
    Read and parse the surface file.

    Raises:
        SurfaceReadError: file cannot be read
        SurfaceDecodeError: file is not UTF-8 or not JSON
    """
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SurfaceDecodeError(f"surface file is not UTF-8: {path}: {e}") from e
    except OSError as e:
        raise SurfaceReadError(f"cannot read surface file {path}: {e.strerror or e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SurfaceDecodeError(
            f"surface file is not valid JSON: {path}: {e.msg} at line {e.lineno} column {e.colno}"
        ) from e


def compile_policy_file(
    source: str | os.PathLike,
    destination: str | os.PathLike,
    variant: PipelineVariant = PERMISSIVE,
) -> PolicyDocument:
    """
    Read, compile, then write. Nothing is written unless compilation succeeds.

    Returns:
        The document that was written.
    """
    source_str = os.fspath(source)
    value = read_surface_file(source_str)
    document = compile_policy(value, source_str, variant)
    path = write_policy_document(document, destination)

    logger.info(
        "Compiled policy document",
        extra={
            "variant": variant.name,
            "source": source_str,
            "destination": str(path),
            "module_count": document.module_count,
        },
    )
    return document

"""
Schema Module — Pydantic Models for the surface and policy documents.

The surface document is the authoritative input: a tagged list of
(module, export) facts. The policy document is the canonical allow-list
consumed by the sandbox layer.

Both schema tags are frozen literals. A document carrying any other tag is
rejected before a single entry is read.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# SCHEMA TAGS (FROZEN)
# =============================================================================

SURFACE_SCHEMA = "fard.stdlib_surface.entries.v1_0"
POLICY_SCHEMA = "fard.anka.policy.allowed_stdlib.v1"


# =============================================================================
# INPUT
# =============================================================================


class SurfaceEntry(BaseModel):
    """One (module, export) fact from the surface document."""

    model_config = ConfigDict(strict=True, frozen=True)

    module: str
    export: str


class SurfaceDocument(BaseModel):
    """
    Surface document after top-level validation.

    Entries are kept raw here; each one is shape-checked by the aggregator
    as it is consumed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_tag: str = Field(alias="schema")
    entries: list[Any]


# =============================================================================
# OUTPUT
# =============================================================================


class PolicyDocument(BaseModel):
    """
    Allow-list policy document — the generator's only artifact.

    Field order is the serialised key order: schema, source, modules.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_tag: str = Field(default=POLICY_SCHEMA, alias="schema")
    source: str
    modules: dict[str, list[str]]

    def to_json_dict(self) -> dict[str, Any]:
        """Plain dict with the wire key names, in wire order."""
        return self.model_dump(by_alias=True)

    @property
    def module_count(self) -> int:
        return len(self.modules)

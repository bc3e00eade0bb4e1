"""
Test fixtures for deterministic testing.

This module provides:
- surfaces: Builders for surface documents (permissive and ANKA-complete)
"""

from .surfaces import make_surface, strict_entries

__all__ = ["make_surface", "strict_entries"]

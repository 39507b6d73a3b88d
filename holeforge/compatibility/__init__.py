"""
Compatibility layer for wire payloads and hole editor layouts.
"""

from .legacy_adapter import LegacyAdapter, weld_shared_vertices
from .json_validator import HoleConfigValidator

__all__ = ["LegacyAdapter", "HoleConfigValidator", "weld_shared_vertices"]

"""
Dataset generation for procedural holes.
"""

from .generator import HoleDatasetGenerator

__all__ = ["HoleDatasetGenerator"]

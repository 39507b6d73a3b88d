"""
Deterministic procedural generation primitives.

This module provides:
- Integer hashing and a seeded random stream shared by shapes and scatter
- Organic ring and corridor generators driven by a shape seed
- Parameter specifications with validation and clamping
"""

from .noise import CHANNELS, SeededStream, hash_unit, hash_signed, seed_to_int, value_noise_2d
from .shapes import SHAPE_PROFILES, organic_ellipse, generate_shape, organic_corridor, tilt_ring
from .params import ParameterSpec

__all__ = [
    "CHANNELS", "SeededStream", "hash_unit", "hash_signed", "seed_to_int", "value_noise_2d",
    "SHAPE_PROFILES", "organic_ellipse", "generate_shape", "organic_corridor", "tilt_ring",
    "ParameterSpec"
]

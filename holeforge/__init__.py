"""
holeforge - procedural golf hole geometry.

Builds organic, seed-reproducible hole layouts (green, fairway, water,
rough tiers, bunkers, tee, obstacles), triangulates them into render
meshes and scores shots against the resulting anchors.
"""

__version__ = "0.1.0"

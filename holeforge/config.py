"""
Hole configuration models.

A configuration is the compact, declarative description peers exchange:
base dimensions, the hole position on the green, an optional water hazard,
optional authoritative obstacles and the shape seed. Field aliases match the
camelCase wire payload.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


WATER_POSITIONS = ("front", "behind", "left", "right")


class FairwayAdjustments(BaseModel):
    """How the fairway corridor makes room for a water hazard."""

    model_config = ConfigDict(populate_by_name=True)

    approach_distance: float = Field(40.0, ge=0, alias="approachDistance",
                                     description="Length before the green over which the fairway bends (m)")
    extension: float = Field(10.0, ge=0, description="Fairway length past the green front (m)")
    left_width_multiplier: float = Field(1.0, gt=0, le=2, alias="leftWidthMultiplier")
    right_width_multiplier: float = Field(1.0, gt=0, le=2, alias="rightWidthMultiplier")


class WaterHazardConfig(BaseModel):
    """Elliptical water body placed relative to the green."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["ellipse"] = "ellipse"
    position: Literal["front", "behind", "left", "right"] = "front"
    center_x: float = Field(..., alias="centerX")
    center_z: float = Field(..., alias="centerZ")
    radius_x: float = Field(..., gt=0, alias="radiusX")
    radius_z: float = Field(..., gt=0, alias="radiusZ")
    fairway_adjustments: FairwayAdjustments = Field(default_factory=FairwayAdjustments,
                                                    alias="fairwayAdjustments")


class ObstaclePlacement(BaseModel):
    """One authoritative obstacle."""

    type: Literal["tree", "bush"]
    size: Literal["small", "medium", "large"]
    x: float
    z: float


class HoleConfiguration(BaseModel):
    """Declarative description of one hole; all distances in meters."""

    model_config = ConfigDict(populate_by_name=True)

    distance_meters: float = Field(150.0, gt=0, le=1000, alias="distanceMeters",
                                   description="Tee to green-center distance")
    green_width: float = Field(18.0, gt=0, le=100, alias="greenWidth")
    green_depth: float = Field(14.0, gt=0, le=100, alias="greenDepth")
    green_offset: float = Field(0.0, ge=-100, le=100, alias="greenOffset",
                                description="Lateral offset of the green from the tee line")
    hole_position_x: float = Field(0.0, ge=-1, le=1, alias="holePositionX",
                                   description="Cup position across the green, -1 left to 1 right")
    hole_position_y: float = Field(0.0, ge=-1, le=1, alias="holePositionY",
                                   description="Cup position along the green, -1 front to 1 back")
    shape_seed: Union[int, float] = Field(0, alias="shapeSeed")
    water_hazard: Optional[WaterHazardConfig] = Field(None, alias="waterHazard")
    obstacles: Optional[List[ObstaclePlacement]] = None

    def to_payload(self) -> dict:
        """Wire form (camelCase, optional fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)

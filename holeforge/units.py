"""
Unit conversion for the display boundary.

Everything inside holeforge works in meters. These helpers exist for the
UI/reporting layer only and are never called by the geometry or scoring code.
"""

METERS_TO_YARDS = 1.09361
YARDS_TO_METERS = 1 / METERS_TO_YARDS
METERS_TO_FEET = 3.28084
FEET_TO_METERS = 1 / METERS_TO_FEET


def meters_to_yards(meters: float) -> float:
    return meters * METERS_TO_YARDS


def yards_to_meters(yards: float) -> float:
    return yards * YARDS_TO_METERS


def meters_to_feet(meters: float) -> float:
    return meters * METERS_TO_FEET


def feet_to_meters(feet: float) -> float:
    return feet * FEET_TO_METERS


def format_distance(meters: float, unit: str = "yards", decimals: int = 1) -> str:
    """Format a distance in meters for display in the requested unit."""
    
    if unit == "meters":
        return f"{meters:.{decimals}f} m"
    if unit == "feet":
        return f"{meters_to_feet(meters):.{decimals}f} ft"
    return f"{meters_to_yards(meters):.{decimals}f} yd"

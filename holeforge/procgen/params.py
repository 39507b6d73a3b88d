"""
Parameter specification with range validation and clamping.
"""

from typing import Dict, List, Tuple


class ParameterSpec:
    """
    Specification for numeric parameters with validation and clamping.

    Each parameter has:
    - min_val: Minimum allowed value
    - max_val: Maximum allowed value
    - default: Default value if not specified
    """

    def __init__(self, params: Dict[str, Tuple[float, float, float]]):
        """
        Initialize parameter specification.

        Args:
            params: Dict mapping param_name -> (min_val, max_val, default)
        """
        self.params = params

    def validate(self, values: Dict[str, float]) -> List[str]:
        """Return error messages for present values that are non-numeric or out of range."""

        errors = []
        for param_name, (min_val, max_val, _) in self.params.items():
            if param_name not in values:
                continue

            value = values[param_name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"Parameter {param_name} must be numeric, got {type(value).__name__}")
            elif not (min_val <= value <= max_val):
                errors.append(f"Parameter {param_name} = {value} out of range [{min_val}, {max_val}]")

        return errors

    def extract_params(self, values: Dict[str, float]) -> Dict[str, float]:
        """Extract parameters, clamping to valid ranges and filling defaults."""

        result = {}
        for param_name, (min_val, max_val, default) in self.params.items():
            value = values.get(param_name)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                # Clamp to valid range
                result[param_name] = max(min_val, min(max_val, float(value)))
            else:
                result[param_name] = default

        return result


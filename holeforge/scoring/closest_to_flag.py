"""
Closest-to-the-flag scoring.

Tracks shots against the flag anchor of the loaded hole. The scorer never
ends a round by itself; the game mode calls terminate().
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..geometry import Vertex, as_vertex
from ..registry.surfaces import is_penalty_surface


logger = logging.getLogger(__name__)


class ScoringState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    SCORED = "scored"


@dataclass(frozen=True)
class ShotResult:
    distance: float
    is_penalty: bool
    shot_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": self.distance,
            "is_penalty": self.is_penalty,
            "shot_number": self.shot_number,
        }


class ClosestToFlagScorer:
    """
    Distance-to-flag scoring for one round.

    Args:
        flag_provider: Returns the current flag anchor, or None when the hole
            has no green
    """

    def __init__(self, flag_provider: Optional[Callable[[], Optional[Vertex]]] = None):
        self.flag_provider = flag_provider
        self.state = ScoringState.IDLE
        self.target_distance = 0.0
        self.shots_taken = 0
        self.best_distance = math.inf

    def initialize(self, target_distance: float) -> None:
        self.target_distance = float(target_distance)
        self.shots_taken = 0
        self.best_distance = math.inf
        self.state = ScoringState.ACTIVE
        logger.info("Closest to flag: target %.1fm", self.target_distance)

    def terminate(self) -> None:
        self.state = ScoringState.IDLE
        logger.info("Closest to flag ended after %d shots", self.shots_taken)

    @property
    def active(self) -> bool:
        return self.state in (ScoringState.ACTIVE, ScoringState.SCORED)

    def record_shot(
        self,
        landing: Any,
        surface_name: Optional[str] = None,
        traveled_distance: Optional[float] = None,
        lateral_offset: Optional[float] = None
    ) -> Optional[ShotResult]:
        """
        Score one landed shot.

        Args:
            landing: Landing position (Vertex, {x, z} dict or (x, z) tuple)
            surface_name: Surface the ball came to rest on
            traveled_distance: Carry plus roll along the target line (m),
                used only when there is no flag anchor
            lateral_offset: Signed offset from the target line (m), same use

        Returns:
            The shot result, or None when no round is running
        """

        if not self.active:
            logger.debug("Ignoring shot while idle")
            return None

        landing = as_vertex(landing)
        self.shots_taken += 1
        flag = self.flag_provider() if self.flag_provider else None

        if flag is not None:
            distance = math.hypot(landing.x - flag.x, landing.z - flag.z)
        else:
            traveled = landing.z if traveled_distance is None else traveled_distance
            side = landing.x if lateral_offset is None else lateral_offset
            distance = math.hypot(abs(self.target_distance - traveled), side)

        penalty = is_penalty_surface(surface_name)
        if distance < self.best_distance:
            self.best_distance = distance
        self.state = ScoringState.SCORED

        logger.info("Shot %d: %.2fm from the flag%s", self.shots_taken, distance,
                    " (penalty)" if penalty else "")
        return ShotResult(distance=distance, is_penalty=penalty, shot_number=self.shots_taken)

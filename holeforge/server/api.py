"""
FastAPI server for hole generation.

Provides REST API endpoints to generate holes from configurations, score
landing positions and inspect the property registries.
"""

import argparse
import logging
import random
import time
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError
import uvicorn

from .. import __version__
from ..compatibility import HoleConfigValidator, LegacyAdapter
from ..config import HoleConfiguration
from ..engine import HoleComposer, HoleConfigGenerator, HoleInstance
from ..registry.obstacles import OBSTACLE_PROPERTIES
from ..registry.surfaces import SURFACES
from ..scoring import ClosestToFlagScorer
from ..units import meters_to_yards
from .preview import preview_to_base64


logger = logging.getLogger(__name__)


# Pydantic models for API
class HoleRequest(BaseModel):
    config: Optional[Dict[str, Any]] = Field(None, description="Authoritative hole configuration payload")
    target_distance: Optional[float] = Field(None, gt=0, le=1000,
                                             description="Distance for a generated configuration (m)")
    seed: Optional[int] = Field(None, description="Seed for a generated configuration")
    return_image: bool = Field(False, description="Return base64-encoded PNG preview")


class HoleResponse(BaseModel):
    config: Dict[str, Any]
    flag_position: Optional[Dict[str, float]]
    green_center: Optional[Dict[str, float]]
    green_radius: Optional[float]
    surfaces: Dict[str, List[Dict[str, Any]]]
    skipped_surfaces: List[str]
    obstacles: List[Dict[str, Any]]
    generation_time: float
    preview_image: Optional[str] = None  # Base64-encoded PNG


class ScoreRequest(BaseModel):
    config: Dict[str, Any] = Field(..., description="Hole configuration payload")
    x: float = Field(..., description="Landing X (m)")
    z: float = Field(..., description="Landing Z (m)")
    surface: Optional[str] = Field(None, description="Lie reported by the simulator")


class ScoreResponse(BaseModel):
    distance: float
    distance_yards: float
    is_penalty: bool
    surface: Optional[str]


class HealthResponse(BaseModel):
    status: str
    version: str


def create_app(cors_origins: List[str] = None) -> FastAPI:
    """Create FastAPI application."""

    app = FastAPI(
        title="holeforge API",
        description="Generate procedural golf holes from compact configurations",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS
    if cors_origins is None:
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    validator = HoleConfigValidator()
    adapter = LegacyAdapter()
    composer = HoleComposer()

    def parse_config(payload: Dict[str, Any]) -> HoleConfiguration:
        payload = adapter.normalize_payload(payload)
        is_valid, errors = validator.validate_payload(payload)
        if not is_valid:
            raise HTTPException(status_code=422, detail=errors)
        try:
            return adapter.payload_to_config(payload)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.post("/holes", response_model=HoleResponse)
    async def generate_hole(request: HoleRequest):
        """Generate a hole from a configuration, or a random one."""

        if request.config is not None:
            config = parse_config(request.config)
        else:
            config = HoleConfigGenerator(random.Random(request.seed)).generate(request.target_distance)

        try:
            start_time = time.time()
            hole = composer.compose(config)
            summary = hole.summary()

            response = HoleResponse(
                config=config.to_payload(),
                flag_position=summary["flag_position"],
                green_center=summary["green_center"],
                green_radius=summary["green_radius"],
                surfaces=summary["surfaces"],
                skipped_surfaces=summary["skipped_surfaces"],
                obstacles=summary["obstacles"],
                generation_time=time.time() - start_time
            )

            if request.return_image:
                response.preview_image = preview_to_base64(hole)

            return response

        except Exception as e:
            logger.exception("Hole generation failed")
            raise HTTPException(status_code=500, detail=f"Generation failed: {str(e)}")

    @app.post("/holes/score", response_model=ScoreResponse)
    async def score_shot(request: ScoreRequest):
        """Distance to the flag and penalty classification for one landing."""

        config = parse_config(request.config)

        try:
            hole: HoleInstance = composer.compose(config)
            surface = request.surface
            if surface is None:
                lie = hole.height_field.surface_at(request.x, request.z)
                surface = lie.key if lie else None

            scorer = ClosestToFlagScorer(hole.get_flag_position)
            scorer.initialize(config.distance_meters)
            result = scorer.record_shot((request.x, request.z), surface_name=surface)

            return ScoreResponse(
                distance=result.distance,
                distance_yards=meters_to_yards(result.distance),
                is_penalty=result.is_penalty,
                surface=surface
            )

        except Exception as e:
            logger.exception("Scoring failed")
            raise HTTPException(status_code=500, detail=f"Scoring failed: {str(e)}")

    @app.get("/registry")
    async def get_registry():
        """Obstacle and surface property tables."""

        return {
            "surfaces": {key: props.to_dict() for key, props in SURFACES.items()},
            "obstacles": [
                {"type": obstacle_type, "size": size, **asdict(props)}
                for (obstacle_type, size), props in OBSTACLE_PROPERTIES.items()
            ],
        }

    return app


def main():
    """CLI entry point for API server."""

    parser = argparse.ArgumentParser(description="holeforge API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind server")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind server")
    parser.add_argument("--log-level", default="info", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print("Starting holeforge API server...")
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Docs: http://{args.host}:{args.port}/docs")

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()

"""
Tests for the HTTP service and the dataset generator.
"""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from holeforge.data_gen import HoleDatasetGenerator
from holeforge.engine import HoleComposer
from holeforge.server import create_app
from holeforge.server.preview import render_preview


@pytest.fixture
def client():
    return TestClient(create_app())


def _payload(**kwargs):
    payload = {"distanceMeters": 150, "shapeSeed": 42, "holePositionX": 0.3, "holePositionY": -0.2}
    payload.update(kwargs)
    return payload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_generate_from_config(client):
    response = client.post("/holes", json={"config": _payload()})
    assert response.status_code == 200

    data = response.json()
    assert data["config"]["distanceMeters"] == 150
    assert len(data["surfaces"]["greens"]) == 1
    assert data["surfaces"]["greens"][0]["vertices"] == 17
    assert data["flag_position"] is not None
    assert data["preview_image"] is None


def test_generation_is_deterministic(client):
    first = client.post("/holes", json={"config": _payload()}).json()
    second = client.post("/holes", json={"config": _payload()}).json()
    assert first["obstacles"] == second["obstacles"]
    assert first["flag_position"] == second["flag_position"]


def test_generate_random_hole_with_preview(client):
    response = client.post("/holes", json={"seed": 7, "target_distance": 130, "return_image": True})
    assert response.status_code == 200

    data = response.json()
    assert data["config"]["distanceMeters"] == 130
    assert data["preview_image"].startswith("data:image/png;base64,")
    png = base64.b64decode(data["preview_image"].split(",", 1)[1])
    assert png[:8] == b"\x89PNG\r\n\x1a\n"


def test_invalid_config_is_rejected(client):
    response = client.post("/holes", json={"config": {"distanceMeters": -5}})
    assert response.status_code == 422
    detail = "\n".join(response.json()["detail"])
    assert "shapeSeed" in detail


def test_score_on_the_green(client):
    hole = client.post("/holes", json={"config": _payload()}).json()
    flag = hole["flag_position"]

    response = client.post("/holes/score", json={
        "config": _payload(), "x": flag["x"] + 3.0, "z": flag["z"] + 4.0, "surface": "GREEN"
    })
    assert response.status_code == 200

    data = response.json()
    assert data["distance"] == pytest.approx(5.0)
    assert data["distance_yards"] == pytest.approx(5.0 * 1.09361)
    assert data["is_penalty"] is False


def test_score_detects_lie(client):
    response = client.post("/holes/score", json={"config": _payload(), "x": 250.0, "z": 60.0})
    data = response.json()
    assert data["surface"] == "OUT_OF_BOUNDS"
    assert data["is_penalty"] is True


def test_registry(client):
    data = client.get("/registry").json()
    assert data["surfaces"]["WATER"]["is_penalty"] is True
    assert len(data["obstacles"]) == 6


def test_dataset_generator(tmp_path):
    generator = HoleDatasetGenerator(output_dir=str(tmp_path), seed=3)
    manifest_path = generator.generate_dataset(num_samples=4)

    with open(manifest_path) as f:
        manifest = json.load(f)
    assert manifest["dataset_file"] == "holes.jsonl"
    assert manifest["dataset_info"]["generation_stats"]["total_generated"] == 4

    with open(tmp_path / "holes.jsonl") as f:
        records = [json.loads(line) for line in f]
    assert [r["id"] for r in records] == [0, 1, 2, 3]
    assert records[1]["seed"] == 4

    # Any record can be rebuilt from its id
    again = HoleDatasetGenerator(output_dir=str(tmp_path / "again"), seed=3).generate_sample(2)
    assert again["config"] == records[2]["config"]
    assert again["obstacles"] == records[2]["obstacles"]


def test_preview_uses_surface_colors():
    hole = HoleComposer().compose(target_distance=150)
    image = render_preview(hole, size=128)

    assert image.size == (128, 128)
    # Corner lies beyond the rough, on the out-of-bounds plane (#808080)
    assert image.getpixel((0, 0)) == (128, 128, 128)

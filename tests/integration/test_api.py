"""Integration tests for API endpoints."""

import pytest
from httpx import AsyncClient, ASGITransport


@pytest.fixture
def app(tmp_path):
    """App writing its logs into a temporary directory."""
    from healthscore.core import config

    original_log_dir = config.settings.log_dir
    config.settings.log_dir = tmp_path / "logs"

    from healthscore.main import app

    yield app

    app.dependency_overrides.clear()
    config.settings.log_dir = original_log_dir


@pytest.fixture
def simple_payload(simple_hierarchy, simple_measurements):
    return {
        "hierarchy": simple_hierarchy.model_dump(mode="json"),
        "measurements": [m.model_dump(mode="json") for m in simple_measurements],
    }


async def _post(app, url, payload):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(url, json=payload)


async def _get(app, url):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(url)


@pytest.mark.asyncio
async def test_root_endpoint(app):
    """Root endpoint returns basic info."""
    response = await _get(app, "/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Project Health Score"
    assert data["status"] == "running"


@pytest.mark.asyncio
async def test_health_endpoint(app):
    """Health endpoint lists the registered strategies."""
    response = await _get(app, "/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "WEIGHTED_AVERAGE_STRATEGY" in data["strategies"]
    assert len(data["strategies"]) == 10


@pytest.mark.asyncio
async def test_request_id_header(app):
    response = await _get(app, "/health")

    assert response.headers.get("X-Request-ID")


@pytest.mark.asyncio
async def test_calculate_with_submitted_hierarchy(app, simple_payload):
    response = await _post(app, "/kpis/calculate", simple_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["root"]["result"] == {"type": "success", "score": 70}
    assert data["schemaVersion"] == "1.1.0"
    edge = data["root"]["edges"][0]
    assert edge["plannedWeight"] == 0.5
    assert edge["actualWeight"] == 0.5
    assert edge["target"]["originId"] == "scan-1"


@pytest.mark.asyncio
async def test_calculate_strict_flag(app, simple_payload):
    simple_payload["measurements"] = simple_payload["measurements"][:1]
    simple_payload["strict"] = True

    response = await _post(app, "/kpis/calculate", simple_payload)

    assert response.status_code == 200
    assert response.json()["root"]["result"] == {
        "type": "error",
        "message": "ROOT: missing value for B",
    }


@pytest.mark.asyncio
async def test_calculate_with_default_hierarchy(app):
    payload = {"measurements": [{"typeId": "SECRETS", "score": 80}]}

    response = await _post(app, "/kpis/calculate", payload)

    assert response.status_code == 200
    data = response.json()
    assert data["root"]["typeId"] == "ROOT"
    assert data["root"]["result"] == {"type": "success", "score": 80}


@pytest.mark.asyncio
async def test_invalid_hierarchy_is_bad_request(app):
    payload = {
        "hierarchy": {
            "root": {
                "typeId": "ROOT",
                "strategy": "RAW_VALUE_STRATEGY",
                "edges": [
                    {"weight": 1.0, "target": {"typeId": "A", "strategy": "RAW_VALUE_STRATEGY"}}
                ],
            }
        },
        "measurements": [],
    }

    response = await _post(app, "/kpis/calculate", payload)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "HierarchyValidationError"
    assert "raw value node must not have edges" in error["message"]


@pytest.mark.asyncio
async def test_unknown_strategy_rejected(app):
    payload = {
        "hierarchy": {"root": {"typeId": "ROOT", "strategy": "MEDIAN_STRATEGY"}},
        "measurements": [],
    }

    response = await _post(app, "/kpis/calculate", payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_default_hierarchy_endpoint(app):
    response = await _get(app, "/kpis/default-hierarchy")

    assert response.status_code == 200
    data = response.json()
    assert data["schemaVersion"] == "1.1.0"
    assert len(data["root"]["edges"]) == 5


@pytest.mark.asyncio
async def test_configured_hierarchy_override(app, simple_hierarchy):
    from healthscore.api.dependencies import get_configured_hierarchy

    app.dependency_overrides[get_configured_hierarchy] = lambda: simple_hierarchy

    response = await _post(
        app,
        "/kpis/calculate",
        {"measurements": [{"typeId": "A", "score": 10}, {"typeId": "B", "score": 30}]},
    )

    assert response.status_code == 200
    assert response.json()["root"]["result"] == {"type": "success", "score": 20}

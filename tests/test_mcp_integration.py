"""
Integration tests for MCP tool endpoints.

Tools run for real except weather, whose API key is cleared so no network call is made.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_mcp_list_tools_returns_definitions(client: TestClient) -> None:
    """GET /mcp/tools returns 200 and the three registered tool schemas."""
    response = client.get("/mcp/tools")
    assert response.status_code == 200
    names = [t["function"]["name"] for t in response.json()["tools"]]
    assert names == ["calculator", "weather", "search"]


def test_mcp_calculator_returns_result(client: TestClient) -> None:
    """POST /mcp/tools/calculator evaluates arithmetic."""
    response = client.post("/mcp/tools/calculator", json={"expression": "12 * 7"})
    assert response.status_code == 200
    assert response.json() == {"result": "84"}


def test_mcp_calculator_rejects_code(client: TestClient) -> None:
    """POST with a code expression returns the invalid-expression result, not an evaluation."""
    response = client.post("/mcp/tools/calculator", json={"expression": "__import__('os').getcwd()"})
    assert response.status_code == 200
    assert response.json() == {"result": "Error: Invalid expression"}


def test_mcp_weather_unavailable_placeholder(client: TestClient) -> None:
    """POST /mcp/tools/weather without an API key returns the placeholder string."""
    with patch("app.agent.tools.OPENWEATHER_API_KEY", ""):
        response = client.post("/mcp/tools/weather", json={"location": "Paris"})
    assert response.status_code == 200
    assert response.json() == {"result": "Weather in Paris is not available"}


def test_mcp_search_without_body(client: TestClient) -> None:
    """POST /mcp/tools/search with no body still returns a result set."""
    response = client.post("/mcp/tools/search")
    assert response.status_code == 200
    assert "results" in response.json()["result"]


def test_mcp_unknown_tool_returns_404(client: TestClient) -> None:
    """POST /mcp/tools/<unknown> returns 404 with an error body."""
    response = client.post("/mcp/tools/shell", json={"cmd": "ls"})
    assert response.status_code == 404
    assert response.json() == {"error": "Unknown tool requested: 'shell'"}

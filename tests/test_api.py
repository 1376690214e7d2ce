"""
HTTP tests for the demo endpoints. Engines and services are patched at the
handler import site so tests do not require OpenAI or Milvus.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.agent.models import StepResult, TaskRun, ToolCall, ToolLoopResult
from app.core.errors import (
    EmptyStepResultError,
    InputError,
    LoopExceededError,
    MalformedArgumentsError,
    ServiceUnavailableError,
)
from app.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


# --- /agent ---

def test_agent_returns_steps_and_result(client: TestClient) -> None:
    run = TaskRun(
        run_id="abc12345",
        steps=[StepResult(action="A: do a", result="ra"), StepResult(action="B: do b", result="rb")],
        result="summary",
    )
    with patch("app.api.handlers.run_task", return_value=run) as mock_run:
        response = client.post("/agent", json={"task": "Plan a trip"})
    assert response.status_code == 200
    assert response.json() == {
        "steps": [
            {"action": "A: do a", "status": "Completed", "result": "ra"},
            {"action": "B: do b", "status": "Completed", "result": "rb"},
        ],
        "result": "summary",
    }
    mock_run.assert_called_once_with("Plan a trip")


def test_agent_missing_task_is_400(client: TestClient) -> None:
    response = client.post("/agent", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Task is required"}


def test_agent_protocol_error_is_500_with_message(client: TestClient) -> None:
    with patch("app.api.handlers.run_task", side_effect=MalformedArgumentsError("Plan arguments are missing required fields: step2_name.")):
        response = client.post("/agent", json={"task": "x"})
    assert response.status_code == 500
    assert response.json() == {"error": "Plan arguments are missing required fields: step2_name."}


def test_agent_empty_step_is_500(client: TestClient) -> None:
    with patch("app.api.handlers.run_task", side_effect=EmptyStepResultError("Book itinerary")):
        response = client.post("/agent", json={"task": "x"})
    assert response.status_code == 500
    assert "Book itinerary" in response.json()["error"]
    assert "steps" not in response.json()


def test_agent_unexpected_error_is_generic(client: TestClient) -> None:
    with patch("app.api.handlers.run_task", side_effect=RuntimeError("secret sk-123 leaked")):
        response = client.post("/agent", json={"task": "x"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process task"}


def test_agent_service_unavailable_is_503(client: TestClient) -> None:
    with patch("app.api.handlers.run_task", side_effect=ServiceUnavailableError("The completion provider is unavailable.")):
        response = client.post("/agent", json={"task": "x"})
    assert response.status_code == 503


# --- /tools ---

def test_tools_returns_response_and_tool_calls(client: TestClient) -> None:
    outcome = ToolLoopResult(
        response="84",
        tool_calls=[ToolCall(name="calculator", arguments={"expression": "12 * 7"}, result="84")],
        turns=2,
    )
    with patch("app.api.handlers.run_tool_loop", return_value=outcome):
        response = client.post("/tools", json={"prompt": "What is 12 * 7?"})
    assert response.status_code == 200
    assert response.json() == {
        "response": "84",
        "toolCalls": [{"name": "calculator", "arguments": {"expression": "12 * 7"}, "result": "84"}],
    }


def test_tools_missing_prompt_is_400(client: TestClient) -> None:
    response = client.post("/tools", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required"}


def test_tools_loop_exceeded_is_500(client: TestClient) -> None:
    with patch("app.api.handlers.run_tool_loop", side_effect=LoopExceededError(8)):
        response = client.post("/tools", json={"prompt": "x"})
    assert response.status_code == 500
    assert "8" in response.json()["error"]


# --- /basic ---

def test_basic_returns_response(client: TestClient) -> None:
    with patch("app.api.handlers.answer_prompt", return_value="Hi there") as mock_answer:
        response = client.post("/basic", json={"prompt": "Hello"})
    assert response.status_code == 200
    assert response.json() == {"response": "Hi there"}
    mock_answer.assert_called_once_with("Hello")


def test_basic_input_error_is_400(client: TestClient) -> None:
    with patch("app.api.handlers.answer_prompt", side_effect=InputError("Prompt is required")):
        response = client.post("/basic", json={"prompt": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required"}


# --- /rag ---

def test_rag_query_returns_response(client: TestClient) -> None:
    with patch("app.api.handlers.answer_query", return_value="From the doc.") as mock_answer:
        response = client.post("/rag/query", json={"query": "What is it?"})
    assert response.status_code == 200
    assert response.json() == {"response": "From the doc."}
    mock_answer.assert_called_once_with("What is it?")


def test_rag_upload_ingests_text(client: TestClient) -> None:
    with patch("app.api.handlers.ingest_document", return_value=2) as mock_ingest:
        response = client.post(
            "/rag/upload",
            files={"file": ("notes.txt", b"First para.\n\nSecond para.", "text/plain")},
        )
    assert response.status_code == 200
    assert response.json() == {"success": True, "chunks": 2}
    mock_ingest.assert_called_once_with("First para.\n\nSecond para.", source="notes.txt")


def test_rag_upload_without_file_is_400(client: TestClient) -> None:
    response = client.post("/rag/upload")
    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


def test_rag_upload_binary_is_400(client: TestClient) -> None:
    with patch("app.api.handlers.ingest_document") as mock_ingest:
        response = client.post("/rag/upload", files={"file": ("x.bin", b"\xff\xfe\x00\x81", "application/octet-stream")})
    assert response.status_code == 400
    mock_ingest.assert_not_called()

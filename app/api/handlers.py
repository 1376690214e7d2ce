"""
API handlers: read request data, call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types.
Every failure is answered as {"error": message}; AppError messages are
caller-safe, anything else is logged and replaced with a generic message.
"""

import logging

from fastapi import UploadFile
from fastapi.responses import JSONResponse

from app.agent.graph import run_task, run_tool_loop
from app.core.errors import AppError, InputError
from app.schemas.agent import AgentRequest, AgentResponse, StepResultOut, ToolCallOut, ToolsRequest, ToolsResponse
from app.schemas.query import PromptRequest, RAGQueryRequest, TextResponse
from app.schemas.upload import UploadResponse
from app.services.prompt_service import answer_prompt
from app.services.rag_service import answer_query, ingest_document

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _app_error_response(route: str, e: AppError) -> JSONResponse:
    logger.warning("[api:%s] %s (%d): %s", route, type(e).__name__, e.status_code, e.message)
    return error_response(e.status_code, e.message)


def handle_basic(body: PromptRequest) -> TextResponse | JSONResponse:
    try:
        answer = answer_prompt(body.prompt or "")
    except AppError as e:
        return _app_error_response("basic", e)
    except Exception:
        logger.exception("[api:basic] Error in basic LLM route")
        return error_response(500, "Failed to process request")
    return TextResponse(response=answer)


def handle_agent(body: AgentRequest) -> AgentResponse | JSONResponse:
    try:
        run = run_task(body.task or "")
    except AppError as e:
        return _app_error_response("agent", e)
    except Exception:
        logger.exception("[api:agent] Error in agent route")
        return error_response(500, "Failed to process task")
    return AgentResponse(
        steps=[StepResultOut(action=s.action, status=s.status, result=s.result) for s in run.steps],
        result=run.result,
    )


def handle_tools(body: ToolsRequest) -> ToolsResponse | JSONResponse:
    try:
        outcome = run_tool_loop(body.prompt or "")
    except AppError as e:
        return _app_error_response("tools", e)
    except Exception:
        logger.exception("[api:tools] Error in tools route")
        return error_response(500, "Failed to process request")
    return ToolsResponse(
        response=outcome.response,
        tool_calls=[ToolCallOut(name=c.name, arguments=c.arguments, result=c.result) for c in outcome.tool_calls],
    )


def handle_rag_query(body: RAGQueryRequest) -> TextResponse | JSONResponse:
    try:
        answer = answer_query(body.query or "")
    except AppError as e:
        return _app_error_response("rag_query", e)
    except Exception:
        logger.exception("[api:rag_query] Error in RAG query route")
        return error_response(500, "Failed to process query. Please check server logs.")
    return TextResponse(response=answer)


async def handle_upload(file: UploadFile | None) -> UploadResponse | JSONResponse:
    """Read the uploaded text file and ingest it paragraph by paragraph."""
    if file is None:
        return error_response(400, "No file provided")
    raw = await file.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return _app_error_response("rag_upload", InputError("Only UTF-8 text files are supported"))
    try:
        chunks = ingest_document(text, source=file.filename or "")
    except AppError as e:
        return _app_error_response("rag_upload", e)
    except Exception:
        logger.exception("[api:rag_upload] Error in RAG upload route")
        return error_response(500, "Failed to process document")
    return UploadResponse(success=True, chunks=chunks)

"""
API route aggregator: register endpoints; no logic, only delegate to handlers.
"""

from fastapi import APIRouter, File, UploadFile

from app.api.handlers import handle_agent, handle_basic, handle_rag_query, handle_tools, handle_upload
from app.schemas.agent import AgentRequest, AgentResponse, ToolsRequest, ToolsResponse
from app.schemas.query import ErrorResponse, PromptRequest, RAGQueryRequest, TextResponse
from app.schemas.upload import UploadResponse

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": ErrorResponse, "description": "Model or tool failure"},
    503: {"model": ErrorResponse, "description": "Provider or vector store unavailable"},
}


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "LLM patterns backend running"}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Direct prompting ---

@router.post(
    "/basic",
    response_model=TextResponse,
    responses=_ERRORS,
    tags=["basic"],
    summary="Send a prompt straight to the model",
)
def post_basic(body: PromptRequest):
    return handle_basic(body)


# --- RAG ---

@router.post(
    "/rag/upload",
    response_model=UploadResponse,
    responses=_ERRORS,
    tags=["rag"],
    summary="Upload a text document into the knowledge base",
    description="Splits the file on blank lines, embeds each paragraph and upserts it into the vector store.",
)
async def post_rag_upload(
    file: UploadFile | None = File(None, description="A UTF-8 text file."),
):
    return await handle_upload(file)


@router.post(
    "/rag/query",
    response_model=TextResponse,
    responses=_ERRORS,
    tags=["rag"],
    summary="Answer a question from the uploaded documents",
)
def post_rag_query(body: RAGQueryRequest):
    return handle_rag_query(body)


# --- Tool calling ---

@router.post(
    "/tools",
    response_model=ToolsResponse,
    responses=_ERRORS,
    tags=["tools"],
    summary="Run the tool-calling loop",
    description="The model may call calculator, weather and search until it returns a final answer.",
)
def post_tools(body: ToolsRequest):
    return handle_tools(body)


# --- Agent ---

@router.post(
    "/agent",
    response_model=AgentResponse,
    responses=_ERRORS,
    tags=["agent"],
    summary="Plan, execute and summarize a task",
    description="Plans exactly two steps, executes them in order with accumulated context, then summarizes.",
)
def post_agent(body: AgentRequest):
    return handle_agent(body)

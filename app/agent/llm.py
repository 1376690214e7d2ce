"""
Agent LLM: OpenAI chat completions and embeddings.

Every model call in the app goes through chat_completion() or embed_texts().
Responses are normalised to AssistantMessage so the planner, executor and
tool loop never touch SDK objects directly.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import openai
from openai import OpenAI

from app.core.config import (
    EMBEDDING_MODEL,
    LLM_API_TIMEOUT,
    LLM_TEMPERATURE,
    OPENAI_API_KEY,
    OPENAI_LLM_MODEL,
)
from app.core.errors import ContextTooLargeError, MalformedArgumentsError, ServiceUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolInvocation:
    """One tool call requested by the model: id, function name, raw JSON arguments."""

    id: str
    name: str
    arguments_json: str

    def parsed_arguments(self) -> dict[str, Any]:
        """Decode arguments_json; anything but a JSON object is malformed."""
        try:
            args = json.loads(self.arguments_json) if self.arguments_json else {}
        except json.JSONDecodeError as e:
            raise MalformedArgumentsError(
                f"Arguments for {self.name!r} are not valid JSON: {e.msg}"
            ) from e
        if not isinstance(args, dict):
            raise MalformedArgumentsError(f"Arguments for {self.name!r} must be a JSON object.")
        return args


@dataclass(frozen=True)
class AssistantMessage:
    """One assistant turn: text content and/or tool invocation requests."""

    content: str | None
    tool_calls: list[ToolInvocation] = field(default_factory=list)

    def to_message(self) -> dict[str, Any]:
        """Message dict to append to the conversation (OpenAI chat format)."""
        msg: dict[str, Any] = {"role": "assistant", "content": self.content or ""}
        if self.tool_calls:
            msg["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments_json},
                }
                for tc in self.tool_calls
            ]
        return msg


def _get_client() -> OpenAI:
    if not OPENAI_API_KEY:
        raise ServiceUnavailableError("OPENAI_API_KEY must be set in .env")
    return OpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)


def chat_completion(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]] | None = None,
    tool_choice: str | dict[str, Any] | None = None,
    temperature: float = LLM_TEMPERATURE,
    max_tokens: int | None = None,
) -> AssistantMessage:
    """
    Call OpenAI chat completions and return the first choice as an AssistantMessage.

    tools / tool_choice are passed through unchanged; forcing a single declared
    function via tool_choice is how structured generation is done.
    """
    logger.info(
        "[llm:chat_completion] IN  messages=%d tools=%s tool_choice=%r",
        len(messages),
        [t["function"]["name"] for t in tools] if tools else [],
        tool_choice,
    )
    kwargs: dict[str, Any] = {
        "model": OPENAI_LLM_MODEL,
        "messages": messages,
        "temperature": temperature,
    }
    if tools:
        kwargs["tools"] = tools
    if tool_choice is not None:
        kwargs["tool_choice"] = tool_choice
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens

    client = _get_client()
    try:
        response = client.chat.completions.create(**kwargs)
    except openai.BadRequestError as e:
        if getattr(e, "code", None) == "context_length_exceeded":
            raise ContextTooLargeError() from e
        raise
    except openai.AuthenticationError as e:
        logger.warning("[llm:chat_completion] authentication failed: %s", e.status_code)
        raise ServiceUnavailableError("API configuration error. Please check your API keys.") from e
    except openai.APIConnectionError as e:
        logger.warning("[llm:chat_completion] provider unreachable: %s", type(e).__name__)
        raise ServiceUnavailableError("The completion provider is unavailable.") from e

    msg = response.choices[0].message if response.choices else None
    if not msg:
        logger.info("[llm:chat_completion] OUT no choices")
        return AssistantMessage(content=None)
    tool_calls = []
    for tc in getattr(msg, "tool_calls", None) or []:
        fn = getattr(tc, "function", None)
        if not fn:
            continue
        tool_calls.append(
            ToolInvocation(
                id=getattr(tc, "id", None) or "",
                name=getattr(fn, "name", None) or "",
                arguments_json=getattr(fn, "arguments", None) or "",
            )
        )
    content = getattr(msg, "content", None)
    logger.info(
        "[llm:chat_completion] OUT content_len=%d tool_calls=%s",
        len(content or ""),
        [t.name for t in tool_calls],
    )
    return AssistantMessage(content=content, tool_calls=tool_calls)


def embed_texts(texts: list[str]) -> list[list[float]]:
    """Embed texts with the OpenAI embeddings API, preserving input order."""
    if not texts:
        return []
    logger.info("[llm:embed_texts] IN  texts=%d model=%s", len(texts), EMBEDDING_MODEL)
    client = _get_client()
    try:
        response = client.embeddings.create(model=EMBEDDING_MODEL, input=texts)
    except openai.AuthenticationError as e:
        raise ServiceUnavailableError("API configuration error. Please check your API keys.") from e
    except openai.APIConnectionError as e:
        raise ServiceUnavailableError("The embedding provider is unavailable.") from e
    data = sorted(response.data, key=lambda d: d.index)
    logger.info("[llm:embed_texts] OUT vectors=%d", len(data))
    return [list(d.embedding) for d in data]

"""Fake model turns for patching app.agent.llm.chat_completion at its import sites."""

import json
from typing import Any

from app.agent.llm import AssistantMessage, ToolInvocation


def text_turn(content: str | None) -> AssistantMessage:
    return AssistantMessage(content=content)


def invocation(name: str, arguments: dict[str, Any] | str, call_id: str = "call_1") -> ToolInvocation:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return ToolInvocation(id=call_id, name=name, arguments_json=raw)


def tool_turn(*calls: ToolInvocation, content: str | None = None) -> AssistantMessage:
    return AssistantMessage(content=content, tool_calls=list(calls))


def plan_turn(
    step1_name: str = "Research destinations",
    step1_description: str = "Compare candidate destinations by cost and season.",
    step2_name: str = "Book itinerary",
    step2_description: str = "Reserve flights and lodging for the chosen destination.",
) -> AssistantMessage:
    return tool_turn(
        invocation(
            "define_two_step_plan",
            {
                "step1_name": step1_name,
                "step1_description": step1_description,
                "step2_name": step2_name,
                "step2_description": step2_description,
            },
            call_id="plan_1",
        )
    )


def user_prompt(call) -> str:
    """User message content of a recorded chat_completion call."""
    messages = call.kwargs.get("messages") if "messages" in call.kwargs else call.args[0]
    return messages[-1]["content"]

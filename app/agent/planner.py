"""
Planner: turn a free-text task into exactly two named steps.

Structured generation: the model is forced to call define_two_step_plan, and
its arguments are the plan. No retry and no partial plan on failure.
"""

import logging

from app.agent.llm import chat_completion
from app.agent.models import Step
from app.core.errors import InputError, MalformedArgumentsError, SchemaNotInvokedError

logger = logging.getLogger(__name__)

PLAN_TOOL_NAME = "define_two_step_plan"

PLAN_FIELDS = ("step1_name", "step1_description", "step2_name", "step2_description")

PLAN_TOOL = {
    "type": "function",
    "function": {
        "name": PLAN_TOOL_NAME,
        "description": "Defines a 2-step plan to accomplish the given task. Each step must be actionable and specific.",
        "parameters": {
            "type": "object",
            "properties": {
                "step1_name": {
                    "type": "string",
                    "description": "A short, descriptive name for the first step.",
                },
                "step1_description": {
                    "type": "string",
                    "description": "A detailed description of the actions to be performed in the first step.",
                },
                "step2_name": {
                    "type": "string",
                    "description": "A short, descriptive name for the second step.",
                },
                "step2_description": {
                    "type": "string",
                    "description": "A detailed description of the actions to be performed in the second step.",
                },
            },
            "required": list(PLAN_FIELDS),
        },
    },
}

PLANNER_SYSTEM_PROMPT = (
    "You are a task planning assistant. Break down the given task into exactly 2 clear, sequential steps. "
    f"Use the '{PLAN_TOOL_NAME}' tool to structure your response. Each step should be actionable and specific."
)


def _steps_from_arguments(args: dict) -> list[Step]:
    missing = [
        f for f in PLAN_FIELDS
        if not isinstance(args.get(f), str) or not args[f].strip()
    ]
    if missing:
        raise MalformedArgumentsError(
            f"Plan arguments are missing required fields: {', '.join(missing)}."
        )
    return [
        Step(name=args["step1_name"].strip(), description=args["step1_description"].strip()),
        Step(name=args["step2_name"].strip(), description=args["step2_description"].strip()),
    ]


def plan(task: str) -> list[Step]:
    """
    Decompose task into two steps via one forced tool call.

    Raises:
        InputError: task is empty.
        SchemaNotInvokedError: the model did not call define_two_step_plan.
        MalformedArgumentsError: arguments are not a JSON object or lack a field.
    """
    task = (task or "").strip()
    if not task:
        raise InputError("Task is required")
    logger.info("[planner:plan] IN  task=%r", task)

    message = chat_completion(
        messages=[
            {"role": "system", "content": PLANNER_SYSTEM_PROMPT},
            {"role": "user", "content": f"Break down this task into steps: {task}"},
        ],
        tools=[PLAN_TOOL],
        tool_choice={"type": "function", "function": {"name": PLAN_TOOL_NAME}},
    )

    if not message.tool_calls:
        logger.warning("[planner:plan] no tool calls; content=%r", (message.content or "")[:200])
        raise SchemaNotInvokedError(
            "LLM failed to generate a plan using the required tool. No tool_calls present."
        )
    call = message.tool_calls[0]
    if call.name != PLAN_TOOL_NAME:
        logger.warning("[planner:plan] expected %s, model called %r", PLAN_TOOL_NAME, call.name)
        raise SchemaNotInvokedError(f"LLM did not use the '{PLAN_TOOL_NAME}' tool as expected.")

    steps = _steps_from_arguments(call.parsed_arguments())
    logger.info("[planner:plan] OUT steps=%s", [s.name for s in steps])
    return steps

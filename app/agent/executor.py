"""
Step executor and summarizer for planned tasks.

Steps run strictly in order: each prompt carries the rendered context of all
previously completed steps, so step i+1 never starts before step i's record
is appended.
"""

import logging

from app.agent.llm import chat_completion
from app.agent.models import ExecutionContext, Step, StepRecord, StepResult
from app.core.config import MAX_PLAN_STEPS, SUMMARY_MAX_CONTEXT_CHARS
from app.core.errors import ContextTooLargeError, EmptyStepResultError, EmptySummaryError, InputError

logger = logging.getLogger(__name__)

EXECUTOR_SYSTEM_PROMPT = (
    "You are a task execution assistant. Execute the given step and provide a clear result. "
    "Use any previous context if provided."
)

SUMMARIZER_SYSTEM_PROMPT = (
    "You are a summarization assistant. Create a clear and concise summary of the task execution results."
)


def build_step_prompt(task: str, step: Step, context: ExecutionContext) -> str:
    return (
        f"Task: {task}\n"
        f"Previous context: {context.render()}\n"
        f"Current step: {step.name} - {step.description}"
    )


def execute_step(task: str, step: Step, context: ExecutionContext, run_id: str = "-") -> StepResult:
    """Run one step, append its record to context, return its StepResult."""
    logger.info("[executor:execute_step] IN  run_id=%s step=%r context_records=%d", run_id, step.name, len(context))
    message = chat_completion(
        messages=[
            {"role": "system", "content": EXECUTOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_step_prompt(task, step, context)},
        ],
    )
    result = message.content
    if result is None or not result.strip():
        logger.warning("[executor:execute_step] run_id=%s step=%r produced no content", run_id, step.name)
        raise EmptyStepResultError(step.name)
    context.append(StepRecord(name=step.name, description=step.description, result=result))
    logger.info("[executor:execute_step] OUT run_id=%s step=%r result_len=%d", run_id, step.name, len(result))
    return StepResult.completed(step, result)


def execute_steps(
    task: str,
    steps: list[Step],
    context: ExecutionContext | None = None,
    run_id: str = "-",
) -> list[StepResult]:
    """
    Execute steps in order with an accumulating context.

    Fails fast: the first empty step result raises EmptyStepResultError and no
    results are returned for that run.
    """
    if len(steps) > MAX_PLAN_STEPS:
        raise InputError(f"Plan has {len(steps)} steps; at most {MAX_PLAN_STEPS} are allowed.")
    context = context if context is not None else ExecutionContext()
    return [execute_step(task, step, context, run_id=run_id) for step in steps]


def summarize(task: str, context: str) -> str:
    """Produce the final synthesis from the rendered execution context."""
    logger.info("[executor:summarize] IN  task=%r context_len=%d", task, len(context))
    if len(context) > SUMMARY_MAX_CONTEXT_CHARS:
        raise ContextTooLargeError(len(context))
    message = chat_completion(
        messages=[
            {"role": "system", "content": SUMMARIZER_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Task: {task}\nExecution results:\n{context}\n\nProvide a final summary of the results.",
            },
        ],
    )
    summary = (message.content or "").strip()
    if not summary:
        raise EmptySummaryError()
    logger.info("[executor:summarize] OUT summary_len=%d", len(summary))
    return summary

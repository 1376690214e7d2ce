"""
LangGraph agents.

Task graph: plan → execute_step (repeat until every step ran) → summarize.
Tool graph: call_model ⇄ dispatch_tools until the model answers without tool calls.

Both graphs are compiled per invocation and hold no state between requests.
"""

import logging
import uuid
from enum import Enum
from typing import Literal, TypedDict

from langgraph.graph import END, StateGraph

from app.agent.executor import execute_step, summarize
from app.agent.llm import chat_completion
from app.agent.models import ExecutionContext, TaskRun, ToolCall, ToolLoopResult
from app.agent.planner import plan
from app.agent.tools import TOOL_DEFINITIONS, execute_tool
from app.core.config import MAX_PLAN_STEPS, MAX_TOOL_ROUNDS
from app.core.errors import AppError, InputError, LoopExceededError

logger = logging.getLogger(__name__)

TOOL_SYSTEM_PROMPT = "You are a helpful assistant that can use tools to accomplish tasks."


# --- Task graph: planner → step executor → summarizer ---

class TaskState(TypedDict):
    run_id: str
    task: str
    steps: list  # list[Step]
    context: ExecutionContext
    results: list  # list[StepResult], execution order
    summary: str


def _plan_node(state: TaskState) -> dict:
    """Node 1: Decompose the task into two named steps."""
    steps = plan(state["task"])
    logger.info("[graph:plan] run_id=%s steps=%s", state["run_id"], [s.name for s in steps])
    return {"steps": steps}


def _execute_step_node(state: TaskState) -> dict:
    """Node 2: Execute the next pending step with the accumulated context."""
    results = state.get("results") or []
    step = state["steps"][len(results)]
    context = state["context"]
    result = execute_step(state["task"], step, context, run_id=state["run_id"])
    return {"results": results + [result], "context": context}


def _route_after_step(state: TaskState) -> Literal["execute_step", "summarize"]:
    done = len(state.get("results") or [])
    next_node = "execute_step" if done < len(state["steps"]) else "summarize"
    logger.info("[graph:route_after_step] run_id=%s done=%d/%d -> %s", state["run_id"], done, len(state["steps"]), next_node)
    return next_node


def _summarize_node(state: TaskState) -> dict:
    """Node 3: Summarize the full execution context."""
    return {"summary": summarize(state["task"], state["context"].render())}


def build_task_graph():
    """
    Build and compile the task graph.
    plan → execute_step → (execute_step again while steps remain, else summarize) → END.
    """
    graph = StateGraph(TaskState)

    graph.add_node("plan", _plan_node)
    graph.add_node("execute_step", _execute_step_node)
    graph.add_node("summarize", _summarize_node)

    graph.set_entry_point("plan")
    graph.add_edge("plan", "execute_step")
    graph.add_conditional_edges("execute_step", _route_after_step)
    graph.add_edge("summarize", END)

    return graph.compile()


def run_task(task: str) -> TaskRun:
    """
    Plan, execute and summarize a task. Returns the ordered step results and summary.
    Any failure aborts the run; partial step results are never returned.
    """
    if not task or not str(task).strip():
        raise InputError("Task is required")
    t = str(task).strip()
    run_id = uuid.uuid4().hex[:8]
    logger.info("[run_task] START run_id=%s task=%r", run_id, t)
    initial: TaskState = {
        "run_id": run_id,
        "task": t,
        "steps": [],
        "context": ExecutionContext(),
        "results": [],
        "summary": "",
    }
    graph = build_task_graph()
    try:
        final = graph.invoke(initial, config={"recursion_limit": MAX_PLAN_STEPS + 5})
    except AppError as e:
        logger.warning("[run_task] FAILED run_id=%s %s: %s", run_id, type(e).__name__, e.message)
        raise
    except Exception:
        logger.exception("[run_task] FAILED run_id=%s", run_id)
        raise
    results = final.get("results") or []
    summary = final.get("summary") or ""
    logger.info("[run_task] END run_id=%s steps=%d summary_len=%d", run_id, len(results), len(summary))
    return TaskRun(run_id=run_id, steps=list(results), result=summary)


# --- Tool graph: model-driven tool-calling loop ---

class LoopPhase(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING_TOOLS = "dispatching_tools"
    DONE = "done"


class ToolLoopState(TypedDict):
    messages: list  # conversation in OpenAI chat format
    pending: list  # list[ToolInvocation] requested in the latest model turn
    tool_calls: list  # list[ToolCall], call order
    turns: int
    phase: LoopPhase
    response: str


def _call_model_node(state: ToolLoopState) -> dict:
    """Ask the model for the next turn; bounded by MAX_TOOL_ROUNDS."""
    turns = state.get("turns") or 0
    if turns >= MAX_TOOL_ROUNDS:
        raise LoopExceededError(MAX_TOOL_ROUNDS)
    message = chat_completion(state["messages"], tools=TOOL_DEFINITIONS, tool_choice="auto")
    messages = state["messages"] + [message.to_message()]
    logger.info("[graph:call_model] turn=%d tool_calls=%s", turns + 1, [tc.name for tc in message.tool_calls])
    if message.tool_calls:
        return {
            "messages": messages,
            "pending": list(message.tool_calls),
            "turns": turns + 1,
            "phase": LoopPhase.DISPATCHING_TOOLS,
        }
    return {
        "messages": messages,
        "pending": [],
        "turns": turns + 1,
        "phase": LoopPhase.DONE,
        "response": message.content or "",
    }


def _dispatch_tools_node(state: ToolLoopState) -> dict:
    """Run every requested tool call in request order, appending id-tagged results."""
    messages = list(state["messages"])
    tool_calls = list(state.get("tool_calls") or [])
    for invocation in state.get("pending") or []:
        args = invocation.parsed_arguments()
        result = execute_tool(invocation.name, args)
        tool_calls.append(ToolCall(name=invocation.name, arguments=args, result=result))
        messages.append({"role": "tool", "tool_call_id": invocation.id, "content": result})
    return {
        "messages": messages,
        "tool_calls": tool_calls,
        "pending": [],
        "phase": LoopPhase.AWAITING_MODEL,
    }


def _route_after_model(state: ToolLoopState) -> str:
    return "dispatch_tools" if state.get("phase") == LoopPhase.DISPATCHING_TOOLS else END


def build_tool_graph():
    """
    Build and compile the tool-calling graph.
    call_model → (dispatch_tools → call_model while tools are requested, else END).
    """
    graph = StateGraph(ToolLoopState)

    graph.add_node("call_model", _call_model_node)
    graph.add_node("dispatch_tools", _dispatch_tools_node)

    graph.set_entry_point("call_model")
    graph.add_conditional_edges("call_model", _route_after_model)
    graph.add_edge("dispatch_tools", "call_model")

    return graph.compile()


def run_tool_loop(prompt: str) -> ToolLoopResult:
    """
    Let the model call tools turn by turn until it returns a final answer.

    Raises:
        InputError: prompt is empty.
        UnknownToolError / MalformedArgumentsError: a tool call could not be dispatched.
        LoopExceededError: no final answer within MAX_TOOL_ROUNDS model turns.
    """
    if not prompt or not str(prompt).strip():
        raise InputError("Prompt is required")
    p = str(prompt).strip()
    logger.info("[run_tool_loop] START prompt=%r max_rounds=%d", p, MAX_TOOL_ROUNDS)
    initial: ToolLoopState = {
        "messages": [
            {"role": "system", "content": TOOL_SYSTEM_PROMPT},
            {"role": "user", "content": p},
        ],
        "pending": [],
        "tool_calls": [],
        "turns": 0,
        "phase": LoopPhase.AWAITING_MODEL,
        "response": "",
    }
    graph = build_tool_graph()
    try:
        final = graph.invoke(initial, config={"recursion_limit": 2 * MAX_TOOL_ROUNDS + 3})
    except AppError as e:
        logger.warning("[run_tool_loop] FAILED %s: %s", type(e).__name__, e.message)
        raise
    tool_calls = final.get("tool_calls") or []
    logger.info("[run_tool_loop] END turns=%d tools_used=%s", final.get("turns", 0), [tc.name for tc in tool_calls])
    return ToolLoopResult(
        response=final.get("response") or "",
        tool_calls=list(tool_calls),
        turns=final.get("turns") or 0,
    )

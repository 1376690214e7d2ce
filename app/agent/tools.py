"""
Agent tools: definitions and execution for tool-calling mode.

Tools: calculator (safe arithmetic), weather (OpenWeatherMap), search (fixed catalog).
Dispatch goes through TOOL_HANDLERS keyed by ToolName; unknown names raise
UnknownToolError instead of falling through.
"""

import ast
import json
import logging
import math
import operator
import re
from enum import Enum
from typing import Any, Callable

import httpx

from app.core.config import OPENWEATHER_API_KEY, OPENWEATHER_URL, TOOLS_HTTP_TIMEOUT
from app.core.errors import UnknownToolError

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    CALCULATOR = "calculator"
    WEATHER = "weather"
    SEARCH = "search"


# OpenAI function-calling format: list of tool definitions
TOOL_DEFINITIONS = [
    {
        "type": "function",
        "function": {
            "name": ToolName.CALCULATOR.value,
            "description": "Perform mathematical calculations. Supports numbers, + - * / // % ** and parentheses.",
            "parameters": {
                "type": "object",
                "properties": {
                    "expression": {
                        "type": "string",
                        "description": "The mathematical expression to evaluate (e.g. 12 * 7)",
                    }
                },
                "required": ["expression"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ToolName.WEATHER.value,
            "description": "Get current weather information",
            "parameters": {
                "type": "object",
                "properties": {
                    "location": {
                        "type": "string",
                        "description": "The city to get weather for",
                    }
                },
                "required": ["location"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": ToolName.SEARCH.value,
            "description": "Search the web for information",
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "The search query",
                    }
                },
                "required": ["query"],
            },
        },
    },
]


# --- calculator ---

INVALID_EXPRESSION = "Error: Invalid expression"
MAX_EXPRESSION_LEN = 200
MAX_EXPONENT = 100
# ints above this size are rejected; keeps str() under the interpreter's digit limit
MAX_RESULT_BITS = 4096

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _bounded(value: Any) -> int | float:
    if isinstance(value, complex):
        raise ValueError("complex result")
    if isinstance(value, int) and value.bit_length() > MAX_RESULT_BITS:
        raise ValueError(f"result exceeds {MAX_RESULT_BITS} bits")
    return value


def _check_power(base: int | float, exponent: int | float) -> None:
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"exponent {exponent} exceeds {MAX_EXPONENT}")
    if abs(base) > 1 and exponent * math.log2(abs(base)) > MAX_RESULT_BITS:
        raise ValueError(f"power exceeds {MAX_RESULT_BITS} bits")


def _eval_node(node: ast.AST) -> int | float:
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return _bounded(node.value)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _bounded(_BINARY_OPS[type(node.op)](left, right))
    raise ValueError(f"unsupported syntax: {type(node).__name__}")


def calculate(expression: str) -> str:
    """Evaluate an arithmetic expression without executing it as code."""
    expr = (expression or "").strip()
    if not expr or len(expr) > MAX_EXPRESSION_LEN:
        return INVALID_EXPRESSION
    try:
        value = _eval_node(ast.parse(expr, mode="eval").body)
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("non-finite result")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    except (SyntaxError, ValueError, TypeError, ZeroDivisionError, OverflowError) as e:
        logger.info("[tools:calculate] rejected expression=%r: %s", expr, e)
        return INVALID_EXPRESSION


# --- weather ---

def _http_client() -> httpx.Client:
    return httpx.Client(timeout=TOOLS_HTTP_TIMEOUT)


def get_weather(location: str) -> str:
    """
    Current weather for a location as one line. Upstream failures of any kind
    return the "not available" placeholder; this never raises.
    """
    location = (location or "").strip()
    if not location:
        return "Error: location is required."
    unavailable = f"Weather in {location} is not available"
    if not OPENWEATHER_API_KEY:
        logger.warning("[tools:get_weather] no OPENWEATHER_API_KEY")
        return unavailable
    try:
        with _http_client() as client:
            response = client.get(
                OPENWEATHER_URL,
                params={"q": location, "units": "metric", "appid": OPENWEATHER_API_KEY},
            )
        if not response.is_success:
            logger.warning("[tools:get_weather] API error %s: %s", response.status_code, response.text[:200])
            return unavailable
        data = response.json()
        # half-up rounding
        temp = math.floor(float(data["main"]["temp"]) + 0.5)
        description = data["weather"][0]["description"]
    except httpx.HTTPError as e:
        logger.warning("[tools:get_weather] request failed: %s", e)
        return unavailable
    except (ValueError, KeyError, IndexError, TypeError, OverflowError) as e:
        logger.warning("[tools:get_weather] unexpected payload: %s", e)
        return unavailable
    return f"Weather in {location}: {temp}°C, {description}"


# --- search ---

SEARCH_CATALOG = [
    {
        "title": "Understanding Async/Await in JavaScript",
        "url": "https://example.com/async-await-js",
        "snippet": "A comprehensive guide to asynchronous programming in JavaScript using async/await.",
    },
    {
        "title": "Top 10 JavaScript Frameworks in 2024",
        "url": "https://example.com/js-frameworks-2024",
        "snippet": "An overview of the most popular JavaScript frameworks and libraries this year.",
    },
    {
        "title": "CSS Grid vs. Flexbox: Which to Choose?",
        "url": "https://example.com/css-grid-flexbox",
        "snippet": "Comparing CSS Grid and Flexbox for layout design, with examples and use cases.",
    },
    {
        "title": "Getting Started with TypeScript",
        "url": "https://example.com/typescript-guide",
        "snippet": "A beginner-friendly introduction to TypeScript, its features, and how to use it in your projects.",
    },
    {
        "title": "The Importance of Web Accessibility (a11y)",
        "url": "https://example.com/web-accessibility",
        "snippet": "Learn why web accessibility is crucial and how to build more inclusive web applications.",
    },
]
SEARCH_MAX_RESULTS = 3


def search(query: str) -> str:
    """
    Rank the fixed catalog by keyword overlap with query. Returns JSON
    {"query", "results"} with one to three entries.
    """
    q = (query or "").strip()
    words = {w for w in re.findall(r"\w+", q.lower()) if len(w) >= 2}

    def score(entry: dict[str, str]) -> int:
        text = f"{entry['title']} {entry['snippet']}".lower()
        return sum(1 for w in words if w in text)

    scored = [(score(e), i, e) for i, e in enumerate(SEARCH_CATALOG)]
    scored.sort(key=lambda x: (-x[0], x[1]))
    matched = [e for s, _, e in scored if s > 0][:SEARCH_MAX_RESULTS]
    results = matched or [scored[0][2]]
    return json.dumps({"query": q, "results": results})


# --- dispatch ---

TOOL_HANDLERS: dict[ToolName, Callable[[dict[str, Any]], str]] = {
    ToolName.CALCULATOR: lambda args: calculate(str(args.get("expression") or "")),
    ToolName.WEATHER: lambda args: get_weather(str(args.get("location") or "")),
    ToolName.SEARCH: lambda args: search(str(args.get("query") or "")),
}


def execute_tool(name: str, arguments: dict[str, Any]) -> str:
    """
    Execute a tool by name with the given arguments. Returns a string result for the LLM.

    Raises:
        UnknownToolError: name is not a registered ToolName.
    """
    args = arguments or {}
    logger.info("[tools] execute_tool name=%r arguments=%r", name, args)
    try:
        tool = ToolName(name)
    except ValueError:
        raise UnknownToolError(name) from None
    result = TOOL_HANDLERS[tool](args)
    logger.info("[tools] execute_tool name=%s result_len=%d", tool.value, len(result))
    return result

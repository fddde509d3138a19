"""General-purpose functions that do not touch the game world."""

from __future__ import annotations

import ast
import math
import operator
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import BaseModel, Field

from craftagent.functions.models import ToolDefinition

if TYPE_CHECKING:
    from craftagent.agent.context import AgentContext


class TimeArgs(BaseModel):
    format: Optional[str] = Field(
        default=None, description="strftime format of the time. Default: %H:%M:%S"
    )


class WeatherArgs(BaseModel):
    city: str = Field(description="The city to get the weather for")


class CalculateArgs(BaseModel):
    expr: str = Field(
        max_length=500,
        description='Math expression, e.g. "(pow(2, 3) + sqrt(16)) / 2". '
        "Supports + - * / // % ** and sin, cos, tan, sqrt, abs, log, log10, exp, pow, min, max.",
    )


_BINARY_OPERATORS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: dict[str, Callable[..., float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sqrt": math.sqrt,
    "abs": abs,
    "log": math.log,
    "log10": math.log10,
    "exp": math.exp,
    "pow": math.pow,
    "min": min,
    "max": max,
}

_CONSTANTS = {"pi": math.pi, "e": math.e}

# Guard against exponent blow-ups like 9**9**9
_MAX_EXPONENT = 1000


class ExpressionError(ValueError):
    """Raised when an expression is not a plain arithmetic expression."""


def _evaluate(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)

    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(
        node.value, bool
    ):
        return node.value

    if isinstance(node, ast.Name):
        if node.id.lower() in _CONSTANTS:
            return _CONSTANTS[node.id.lower()]
        raise ExpressionError(f'Identifier "{node.id}" is not allowed')

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, ast.Pow) and abs(right) > _MAX_EXPONENT:
            raise ExpressionError("Exponent is too large")
        return _BINARY_OPERATORS[type(node.op)](left, right)

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate(node.operand))

    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and not node.keywords:
        function = _FUNCTIONS.get(node.func.id.lower())
        if function is None:
            raise ExpressionError(f'Function "{node.func.id}" is not allowed')
        return function(*(_evaluate(arg) for arg in node.args))

    raise ExpressionError(f"Unsupported syntax: {type(node).__name__}")


def safe_eval_expression(expr: str) -> float:
    """Evaluate an arithmetic expression without executing arbitrary code.

    Raises:
        ExpressionError: If the expression is empty, uses anything but numbers,
            operators and whitelisted math functions, or is not finite
    """
    source = expr.strip().replace("^", "**")
    if not source:
        raise ExpressionError("Empty expression")

    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"Failed to parse expression: {e.msg}") from e

    try:
        value = _evaluate(tree)
        finite = not isinstance(value, complex) and math.isfinite(value)
    except ExpressionError:
        raise
    except (ArithmeticError, TypeError, ValueError) as e:
        raise ExpressionError(f"Error while evaluating expression: {e}") from e

    if not finite:
        raise ExpressionError("Expression did not evaluate to a finite number")
    return value


async def get_time(agent: AgentContext, args: TimeArgs):
    fmt = args.format or "%H:%M:%S"
    try:
        return {"message": datetime.now().strftime(fmt)}
    except ValueError as e:
        return f"Invalid time format '{fmt}': {e}"


async def get_weather(agent: AgentContext, args: WeatherArgs):
    # Fixed reading until a weather source is wired in
    return {
        "message": {
            "city": args.city,
            "temperature": 20,
            "humidity": 50,
            "pressure": 1013,
            "wind_speed": 5,
            "wind_direction": "N",
        }
    }


async def calculate(agent: AgentContext, args: CalculateArgs):
    try:
        value = safe_eval_expression(args.expr)
    except ExpressionError as e:
        return f"Error: {e}"
    return {"message": value}


UTILITY_FUNCTIONS: list[ToolDefinition] = [
    ToolDefinition(
        name="get_time",
        description="Get the current time",
        parameters=TimeArgs,
        handler=get_time,
    ),
    ToolDefinition(
        name="get_weather",
        description="Get the current weather",
        parameters=WeatherArgs,
        handler=get_weather,
    ),
    ToolDefinition(
        group="unsafe",
        name="calculate",
        description="Evaluates math expression. Use it when you need to calculate some numeric value.",
        parameters=CalculateArgs,
        handler=calculate,
    ),
]

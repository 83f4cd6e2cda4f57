"""
ReAct Actions

The closed set of decisions the agent can take in one iteration, and the
decoder that maps raw reasoning-backend text to exactly one of them.

Decoding is a pure, total function. Markers are case-sensitive and are
checked in fixed precedence:
1. FINAL ANSWER:  (prefix)   -> FinalAnswer
2. ACTION:        (anywhere) -> ToolCall, optional ARGS: line parsed as JSON
3. THOUGHT:       (prefix)   -> Think
4. DELEGATE:      (anywhere) -> Delegate, optional CONTEXT: line
5. anything else             -> Think with the whole trimmed text
"""

import json
from dataclasses import dataclass, field
from typing import Union

from agentloop.core.domain.models import JsonValue

FINAL_ANSWER_MARKER = "FINAL ANSWER:"
ACTION_MARKER = "ACTION:"
ARGS_MARKER = "ARGS:"
THOUGHT_MARKER = "THOUGHT:"
DELEGATE_MARKER = "DELEGATE:"
CONTEXT_MARKER = "CONTEXT:"


@dataclass(frozen=True)
class ToolCall:
    name: str
    args: JsonValue = field(default_factory=dict)


@dataclass(frozen=True)
class FinalAnswer:
    text: str


@dataclass(frozen=True)
class Think:
    text: str


@dataclass(frozen=True)
class Delegate:
    objective: str
    context: str = ""


ReActAction = Union[ToolCall, FinalAnswer, Think, Delegate]


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()


def _parse_args(line: str) -> JsonValue:
    try:
        return json.loads(line)
    except (ValueError, RecursionError):
        return {}


def parse_action(response: str) -> ReActAction:
    """
    Decode one action from raw reasoning output.

    Args:
        response: Raw text returned by the reasoning backend

    Returns:
        Exactly one ReActAction; never raises.

    Example:
        >>> parse_action("FINAL ANSWER: The result is 42.")
        FinalAnswer(text='The result is 42.')
    """
    text = response.strip()

    if text.startswith(FINAL_ANSWER_MARKER):
        return FinalAnswer(text[len(FINAL_ANSWER_MARKER):].strip())

    if ACTION_MARKER in text:
        rest = text.split(ACTION_MARKER, 1)[1]
        name = _first_line(rest)
        args: JsonValue = {}
        args_pos = rest.find(ARGS_MARKER)
        if args_pos != -1:
            args = _parse_args(_first_line(rest[args_pos + len(ARGS_MARKER):]))
        return ToolCall(name=name, args=args)

    if text.startswith(THOUGHT_MARKER):
        return Think(text[len(THOUGHT_MARKER):].strip())

    if DELEGATE_MARKER in text:
        rest = text.split(DELEGATE_MARKER, 1)[1]
        objective = _first_line(rest)
        context = ""
        ctx_pos = rest.find(CONTEXT_MARKER)
        if ctx_pos != -1:
            context = _first_line(rest[ctx_pos + len(CONTEXT_MARKER):])
        return Delegate(objective=objective, context=context)

    return Think(text)

"""
ReAct Prompts

Fixed texts exchanged with the reasoning backend. The marker words in
REACT_SYSTEM_PROMPT (GOAL:, AVAILABLE TOOLS:, INSTRUCTIONS:, RESPONSE FORMAT:,
THOUGHT:, ACTION:, ARGS:, FINAL ANSWER:) are matched by the action decoder and
by existing prompting conventions, so the text must not be reworded.

Usage:
    from agentloop.core.prompts.react_prompts import build_system_prompt

    system_prompt = build_system_prompt(goal="Summarize the report")
"""

import json

TOOLS_PLACEHOLDER = "Tools will be loaded when execution starts."

REACT_SYSTEM_PROMPT = """You are an AI assistant that uses the ReAct (Reasoning + Acting) pattern.

GOAL: {goal}

AVAILABLE TOOLS:
{tools_description}

INSTRUCTIONS:
1. Think step by step about what needs to be done
2. Use tools when needed by responding with ACTION
3. After receiving tool results, continue reasoning
4. When done, provide your FINAL ANSWER

RESPONSE FORMAT:
Use exactly one of these formats in each response:

For thinking/reasoning:
THOUGHT: <your reasoning here>

For tool calls:
ACTION: <tool_name>
ARGS: <json arguments>

For final answer (when task is complete):
FINAL ANSWER: <your complete answer>

Always think before acting. Be concise and focused on the goal."""

THINK_NUDGE = (
    "Please take an action using a tool, or provide your FINAL ANSWER if the task is complete."
)

OBSERVATION_PREFIX = "OBSERVATION: "
DELEGATION_RESULT_PREFIX = "DELEGATION RESULT: "


def build_system_prompt(goal: str, tools_description: str = TOOLS_PLACEHOLDER) -> str:
    """Render the system prompt for a new session."""
    return REACT_SYSTEM_PROMPT.format(goal=goal, tools_description=tools_description)


def format_references(context_summary: str, visual_refs: list[str] | tuple[str, ...]) -> str:
    """Render the initial user entry: context summary plus a reference listing."""
    if not visual_refs:
        return context_summary
    return f"{context_summary}\n\nReferences: {json.dumps(list(visual_refs), ensure_ascii=False)}"


def mock_execution_message(goal: str) -> str:
    return f"Mock ReAct execution. Goal: {goal}. Configure LLM client for real execution."

"""Unit tests for domain value types, intent parsing and prompt rendering."""

import pytest

from agentloop.core.domain.models import (
    ChatMessage,
    ComplexMission,
    DataResult,
    ErrorResult,
    FastAction,
    FileResult,
    TextResult,
    ToolOutput,
    intent_from_dict,
)
from agentloop.core.prompts.react_prompts import (
    build_system_prompt,
    format_references,
    mock_execution_message,
)


class TestIntentFromDict:
    def test_fast_action(self):
        intent = intent_from_dict(
            {"type": "fast_action", "payload": {"tool_name": "echo", "args": {"text": "hi"}}}
        )
        assert intent == FastAction(tool_name="echo", args={"text": "hi"})

    def test_complex_mission(self):
        intent = intent_from_dict(
            {
                "type": "complex_mission",
                "payload": {"goal": "Describe", "visual_refs": ["img-1"], "session_id": "s-1"},
            }
        )
        assert intent == ComplexMission(goal="Describe", visual_refs=("img-1",), session_id="s-1")

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "teleport", "payload": {}},
            {"type": "fast_action", "payload": {}},
            {"type": "complex_mission", "payload": {"context_summary": "x"}},
            {},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(ValueError):
            intent_from_dict(data)


class TestResults:
    def test_to_dict(self):
        assert TextResult("hi").to_dict() == {"type": "text", "payload": "hi"}
        assert DataResult([1]).to_dict() == {"type": "data", "payload": [1]}
        assert FileResult("r1", "a.png", "image/png").to_dict()["payload"]["ref_id"] == "r1"
        assert ErrorResult("bad", "X").to_dict() == {
            "type": "error",
            "payload": {"message": "bad", "code": "X"},
        }

    def test_tool_output_reference(self):
        output = ToolOutput.reference("ref-1", "Large CSV")
        assert output.success
        assert output.content == "Output saved as RefID: ref-1. Large CSV"
        assert output.created_refs == ["ref-1"]

    def test_chat_message_to_dict(self):
        assert ChatMessage("user", "hi").to_dict() == {"role": "user", "content": "hi"}


class TestPrompts:
    def test_system_prompt_embeds_goal(self):
        prompt = build_system_prompt("Add 5 and 3")
        assert prompt.startswith("You are an AI assistant that uses the ReAct")
        assert "GOAL: Add 5 and 3\n" in prompt
        assert "AVAILABLE TOOLS:\nTools will be loaded when execution starts.\n" in prompt
        assert prompt.endswith("Always think before acting. Be concise and focused on the goal.")

    def test_format_references(self):
        assert format_references("ctx", []) == "ctx"
        assert format_references("ctx", ["a", "b"]) == 'ctx\n\nReferences: ["a", "b"]'

    def test_format_references_escapes_quotes(self):
        assert format_references("ctx", ['say "hi"', "C:\\img"]) == (
            'ctx\n\nReferences: ["say \\"hi\\"", "C:\\\\img"]'
        )

    def test_mock_execution_message(self):
        assert mock_execution_message("g") == (
            "Mock ReAct execution. Goal: g. Configure LLM client for real execution."
        )

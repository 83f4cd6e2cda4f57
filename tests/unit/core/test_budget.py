"""Unit tests for TokenUsage."""

from agentloop.core.domain.budget import TokenUsage


class TestTokenUsage:
    def test_with_budget_starts_at_zero(self):
        usage = TokenUsage.with_budget(1000)
        assert usage.total_tokens == 0
        assert usage.budget_limit == 1000
        assert not usage.is_exceeded()
        assert usage.remaining() == 1000

    def test_add_accumulates(self):
        usage = TokenUsage.with_budget(1000)
        usage.add(100, 50)
        usage.add(10, 5)
        assert usage.prompt_tokens == 110
        assert usage.completion_tokens == 55
        assert usage.total_tokens == 165
        assert usage.remaining() == 835

    def test_exceeded_at_boundary(self):
        usage = TokenUsage.with_budget(100)
        usage.add(60, 39)
        assert not usage.is_exceeded()
        usage.add(1, 0)
        assert usage.is_exceeded()
        assert usage.remaining() == 0

    def test_remaining_never_negative(self):
        usage = TokenUsage.with_budget(100)
        usage.add(200, 50)
        assert usage.remaining() == 0

    def test_zero_budget_is_exceeded_immediately(self):
        assert TokenUsage.with_budget(0).is_exceeded()

    def test_from_dict_recomputes_total(self):
        usage = TokenUsage.from_dict(
            {"prompt_tokens": 7, "completion_tokens": 3, "total_tokens": 999, "budget_limit": 50}
        )
        assert usage.total_tokens == 10
        assert usage.to_dict() == {
            "prompt_tokens": 7,
            "completion_tokens": 3,
            "total_tokens": 10,
            "budget_limit": 50,
        }

"""
Unit tests for the step executor, execution context and summarizer.
"""

from unittest.mock import patch

import pytest

from app.agent.executor import execute_steps, summarize
from app.agent.models import ExecutionContext, Step, StepRecord, StepResult
from app.core.errors import ContextTooLargeError, EmptyStepResultError, EmptySummaryError, InputError
from tests.fakes import text_turn, user_prompt

STEPS = [
    Step("Research destinations", "Compare candidate destinations."),
    Step("Book itinerary", "Reserve flights and lodging."),
]


class TestExecutionContext:
    """Tests for ExecutionContext rendering."""

    def test_empty_renders_empty(self) -> None:
        assert ExecutionContext().render() == ""

    def test_records_render_in_order(self) -> None:
        ctx = ExecutionContext()
        ctx.append(StepRecord("A", "do a", "ra"))
        ctx.append(StepRecord("B", "do b", "rb"))
        assert ctx.render() == "\nStep: A - do a\nResult: ra\nStep: B - do b\nResult: rb"
        assert len(ctx) == 2


class TestExecuteSteps:
    """Tests for execute_steps()."""

    def test_results_are_ordered_and_completed(self) -> None:
        with patch("app.agent.executor.chat_completion", side_effect=[text_turn("r1"), text_turn("r2")]):
            results = execute_steps("Plan a trip", STEPS)
        assert results == [
            StepResult(action="Research destinations: Compare candidate destinations.", result="r1"),
            StepResult(action="Book itinerary: Reserve flights and lodging.", result="r2"),
        ]
        assert all(r.status == "Completed" for r in results)

    def test_second_prompt_contains_first_result(self) -> None:
        first = "Lisbon is affordable in spring."
        with patch(
            "app.agent.executor.chat_completion",
            side_effect=[text_turn(first), text_turn("Booked.")],
        ) as mock_chat:
            execute_steps("Plan a trip", STEPS)
        first_prompt = user_prompt(mock_chat.call_args_list[0])
        second_prompt = user_prompt(mock_chat.call_args_list[1])
        assert first not in first_prompt
        assert "Current step: Research destinations - Compare candidate destinations." in first_prompt
        assert first in second_prompt
        assert second_prompt.startswith("Task: Plan a trip\nPrevious context: \nStep: Research destinations")
        assert second_prompt.endswith("Current step: Book itinerary - Reserve flights and lodging.")

    def test_context_accumulates_records(self) -> None:
        ctx = ExecutionContext()
        with patch("app.agent.executor.chat_completion", side_effect=[text_turn("r1"), text_turn("r2")]):
            execute_steps("t", STEPS, context=ctx)
        assert [r.result for r in ctx.records] == ["r1", "r2"]

    @pytest.mark.parametrize("empty", [None, "", "  \n"])
    def test_empty_result_fails_fast(self, empty) -> None:
        ctx = ExecutionContext()
        with patch(
            "app.agent.executor.chat_completion",
            side_effect=[text_turn(empty), text_turn("never")],
        ) as mock_chat:
            with pytest.raises(EmptyStepResultError) as exc:
                execute_steps("t", STEPS, context=ctx)
        assert exc.value.step_name == "Research destinations"
        assert mock_chat.call_count == 1
        assert len(ctx) == 0

    def test_empty_second_step_aborts_after_first(self) -> None:
        ctx = ExecutionContext()
        with patch("app.agent.executor.chat_completion", side_effect=[text_turn("r1"), text_turn("")]):
            with pytest.raises(EmptyStepResultError) as exc:
                execute_steps("t", STEPS, context=ctx)
        assert exc.value.step_name == "Book itinerary"
        assert len(ctx) == 1

    def test_too_many_steps_rejected(self) -> None:
        steps = [Step(f"s{i}", "d") for i in range(3)]
        with patch("app.agent.executor.MAX_PLAN_STEPS", 2), patch("app.agent.executor.chat_completion") as mock_chat:
            with pytest.raises(InputError):
                execute_steps("t", steps)
        mock_chat.assert_not_called()


class TestSummarize:
    """Tests for summarize()."""

    def test_returns_summary_and_sends_context(self) -> None:
        context = "\nStep: A - do a\nResult: ra"
        with patch("app.agent.executor.chat_completion", return_value=text_turn(" Done. ")) as mock_chat:
            assert summarize("t", context) == "Done."
        prompt = user_prompt(mock_chat.call_args)
        assert prompt == f"Task: t\nExecution results:\n{context}\n\nProvide a final summary of the results."

    def test_empty_summary_raises(self) -> None:
        with patch("app.agent.executor.chat_completion", return_value=text_turn(None)):
            with pytest.raises(EmptySummaryError):
                summarize("t", "ctx")

    def test_oversized_context_rejected_without_call(self) -> None:
        with patch("app.agent.executor.SUMMARY_MAX_CONTEXT_CHARS", 10), patch(
            "app.agent.executor.chat_completion"
        ) as mock_chat:
            with pytest.raises(ContextTooLargeError) as exc:
                summarize("t", "x" * 11)
        assert exc.value.context_len == 11
        mock_chat.assert_not_called()

    def test_provider_context_rejection_propagates(self) -> None:
        with patch("app.agent.executor.chat_completion", side_effect=ContextTooLargeError()):
            with pytest.raises(ContextTooLargeError):
                summarize("t", "ctx")

"""Tests for summary, session plan, and chat generation."""

from __future__ import annotations

import asyncio

import pytest

from coursedesk import NoActiveContextError, SessionPlan, SummaryArtifact
from coursedesk.models.artifacts import ChatTurn
from coursedesk.operations.generation import CHAT_FAILURE_TEXT

from conftest import PLAN_PAYLOAD, SUMMARY_PAYLOAD, FakeBackend, RecordingNotifier


class TestSummary:
    @pytest.mark.asyncio
    async def test_stores_and_returns(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        summary = await active_ws.generate_summary()
        assert summary is active_ws.summary
        assert summary.model_dump() == SUMMARY_PAYLOAD
        assert ("success", "Summary generated!") in notifier.notices
        payload = backend.payloads("/generate-summary")[0]
        assert (payload["course_id"], payload["division"]) == ("CS101", "A")

    @pytest.mark.asyncio
    async def test_failure_keeps_previous(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        previous = SummaryArtifact(summary=["earlier"])
        active_ws.summary = previous
        backend.fail("/generate-summary", 500)
        assert await active_ws.generate_summary() is None
        assert active_ws.summary is previous
        assert active_ws.errors["summary"] == "Summary generation failed"
        assert notifier.errors() == ["Summary generation failed"]
        assert active_ws.busy.generating_summary is False

    @pytest.mark.asyncio
    async def test_server_detail_verbatim(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        backend.fail("/generate-summary", 400, {"detail": "No materials uploaded yet"})
        await active_ws.generate_summary()
        assert notifier.errors() == ["No materials uploaded yet"]

    @pytest.mark.asyncio
    async def test_connection_error_message(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        backend.disconnect("/generate-summary")
        await active_ws.generate_summary()
        assert notifier.errors() == ["Connection error during summary generation"]

    @pytest.mark.asyncio
    async def test_success_clears_error_slot(self, active_ws, backend: FakeBackend):
        backend.fail("/generate-summary", 500)
        await active_ws.generate_summary()
        backend.heal("/generate-summary")
        await active_ws.generate_summary()
        assert "summary" not in active_ws.errors

    @pytest.mark.asyncio
    async def test_result_for_abandoned_context_is_dropped(
        self, active_ws, backend: FakeBackend
    ):
        backend.gated.add("/generate-summary")
        task = asyncio.create_task(active_ws.generate_summary())
        await backend.wait_for_gates("/generate-summary", 1)
        await active_ws.select("MA201")
        backend.gates["/generate-summary"][0].set()
        assert await task is None
        assert active_ws.summary is None

    @pytest.mark.asyncio
    async def test_requires_context(self, ws):
        with pytest.raises(NoActiveContextError):
            await ws.generate_summary()


class TestPlan:
    @pytest.mark.asyncio
    async def test_generates(self, active_ws, notifier: RecordingNotifier):
        plan = await active_ws.generate_plan()
        assert plan == SessionPlan.model_validate(PLAN_PAYLOAD)
        assert active_ws.plan == plan
        assert ("success", "Session plan ready!") in notifier.notices

    @pytest.mark.asyncio
    async def test_regenerate_discards_edits_and_leaves_edit_mode(self, active_ws):
        await active_ws.generate_plan()
        active_ws.toggle_plan_editing()
        active_ws.set_plan_title("Edited")
        assert active_ws.editing_plan

        await active_ws.generate_plan()
        assert active_ws.plan.session_title == "Loops and Iteration"
        assert active_ws.editing_plan is False

    @pytest.mark.asyncio
    async def test_failure(self, active_ws, backend: FakeBackend, notifier: RecordingNotifier):
        backend.fail("/generate-session-plan", 503)
        assert await active_ws.generate_plan() is None
        assert active_ws.plan is None
        assert notifier.errors() == ["Plan generation failed"]

    @pytest.mark.asyncio
    async def test_connection_failure(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        backend.disconnect("/generate-session-plan")
        await active_ws.generate_plan()
        assert notifier.errors() == ["Connection error during plan generation"]


class TestPlanEditing:
    @pytest.mark.asyncio
    async def test_edits_are_local(self, active_ws, backend: FakeBackend):
        await active_ws.generate_plan()
        backend.calls.clear()

        active_ws.set_plan_title("While loops")
        active_ws.update_plan_block(1, "duration", "25 min")
        active_ws.update_plan_question(0, 0, "What does a variable hold?")

        assert active_ws.plan.session_title == "While loops"
        assert active_ws.plan.blocks[1].duration == "25 min"
        assert active_ws.plan.blocks[0].questions == ["What does a variable hold?"]
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_toggle_without_plan_stays_off(self, ws):
        assert ws.toggle_plan_editing() is False

    @pytest.mark.asyncio
    async def test_edit_without_plan_raises(self, ws):
        with pytest.raises(ValueError, match="No session plan"):
            ws.set_plan_title("x")


class TestChat:
    @pytest.mark.asyncio
    async def test_appends_faculty_then_ai(self, active_ws, backend: FakeBackend):
        active_ws.chat_input = "What is a loop?"
        answer = await active_ws.send_chat()
        assert answer == "Loops repeat a block of code."
        assert active_ws.chat == [
            ChatTurn(role="faculty", content="What is a loop?"),
            ChatTurn(role="ai", content="Loops repeat a block of code."),
        ]
        assert active_ws.chat_input == ""
        payload = backend.payloads("/chat")[0]
        assert payload["question"] == "What is a loop?"
        assert payload["history"] == []

    @pytest.mark.asyncio
    async def test_history_is_prior_turns_only(self, active_ws, backend: FakeBackend):
        await active_ws.send_chat("first")
        await active_ws.send_chat("second")
        history = backend.payloads("/chat")[1]["history"]
        assert history == [
            {"role": "faculty", "content": "first"},
            {"role": "ai", "content": "Loops repeat a block of code."},
        ]

    @pytest.mark.asyncio
    async def test_blank_is_noop(self, active_ws, backend: FakeBackend):
        assert await active_ws.send_chat("   ") is None
        assert active_ws.chat == []
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_failure_appends_error_turn(self, active_ws, backend: FakeBackend):
        backend.disconnect("/chat")
        assert await active_ws.send_chat("hello?") is None
        assert [t.role for t in active_ws.chat] == ["faculty", "error"]
        assert active_ws.chat[-1].content == CHAT_FAILURE_TEXT
        assert active_ws.busy.sending_chat is False

    @pytest.mark.asyncio
    async def test_error_turns_not_sent_as_history(self, active_ws, backend: FakeBackend):
        backend.fail("/chat", 500)
        await active_ws.send_chat("lost")
        backend.heal("/chat")
        await active_ws.send_chat("retry")
        history = backend.payloads("/chat")[1]["history"]
        assert history == [{"role": "faculty", "content": "lost"}]
        assert "chat" not in active_ws.errors

    @pytest.mark.asyncio
    async def test_server_detail_becomes_error_turn(self, active_ws, backend: FakeBackend):
        backend.fail("/chat", 429, {"detail": "Rate limit reached"})
        await active_ws.send_chat("hi")
        assert active_ws.chat[-1] == ChatTurn(role="error", content="Rate limit reached")

    @pytest.mark.asyncio
    async def test_answer_after_switch_is_dropped(self, active_ws, backend: FakeBackend):
        backend.gated.add("/chat")
        task = asyncio.create_task(active_ws.send_chat("hi"))
        await backend.wait_for_gates("/chat", 1)
        await active_ws.select("CS101", "B")
        backend.gates["/chat"][0].set()
        assert await task is None
        assert active_ws.chat == []


class TestMalformedReplies:
    @pytest.mark.asyncio
    async def test_null_summary_is_reported_not_raised(
        self, active_ws, backend: FakeBackend, notifier: RecordingNotifier
    ):
        backend.summary = {"summary": None, "key_concepts": [], "discussion_prompts": []}
        assert await active_ws.generate_summary() is None
        assert active_ws.summary is None
        assert active_ws.errors["summary"] == "Unexpected response shape"
        assert notifier.errors() == ["Unexpected response shape"]
        assert active_ws.busy.generating_summary is False

    @pytest.mark.asyncio
    async def test_null_plan_questions_is_reported_not_raised(
        self, active_ws, backend: FakeBackend
    ):
        backend.plan = {"session_title": "T", "blocks": [{"title": "B", "questions": None}]}
        assert await active_ws.generate_plan() is None
        assert active_ws.plan is None
        assert "plan" in active_ws.errors
        assert active_ws.busy.generating_plan is False

from __future__ import annotations

import asyncio
import logging

from lyricistant.editor.surface import TextBuffer, TextRange
from lyricistant.render.panel import RhymePanel
from lyricistant.rhymes.pipeline import PipelineState, QueryPipeline
from lyricistant.rhymes.types import WordAtPosition
from tests.mocks.rhyme_mock import FakeRhymeLookup, RecordingRender

CAT = WordAtPosition("cat", TextRange.on_line(0, 0, 3))
HAT = WordAtPosition("hat", TextRange.on_line(0, 4, 7))


async def _until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        assert loop.time() < deadline, "condition not reached in time"
        await asyncio.sleep(0.005)


class TestDebounce:
    def test_burst_collapses_to_last_word(self):
        lookup = FakeRhymeLookup({"hat": ["bat", "sat"]})
        render = RecordingRender()

        async def scenario():
            p = QueryPipeline(lookup, render, debounce_s=0.05)
            p.submit(CAT)
            p.submit(CAT)
            await asyncio.sleep(0.01)
            p.submit(HAT)
            assert p.state is PipelineState.DEBOUNCING
            await p.wait_idle()
            return p

        p = asyncio.run(scenario())
        assert lookup.calls == ["hat"]
        assert render.calls == [(HAT, ["bat", "sat"])]
        assert p.state is PipelineState.IDLE

    def test_nothing_issued_before_quiet_period(self):
        lookup = FakeRhymeLookup()

        async def scenario():
            p = QueryPipeline(lookup, RecordingRender(), debounce_s=0.2)
            p.submit(CAT)
            await asyncio.sleep(0.05)
            calls_early = list(lookup.calls)
            await p.wait_idle()
            return calls_early

        assert asyncio.run(scenario()) == []
        assert lookup.calls == ["cat"]

    def test_repeated_event_does_not_restart_timer(self):
        lookup = FakeRhymeLookup()

        async def scenario():
            p = QueryPipeline(lookup, RecordingRender(), debounce_s=0.2)
            p.submit(CAT)
            await asyncio.sleep(0.12)
            p.submit(WordAtPosition("cat", TextRange.on_line(0, 0, 3)))
            # past the original deadline, well before a restarted one
            await asyncio.sleep(0.14)
            return list(lookup.calls)

        assert asyncio.run(scenario()) == ["cat"]

    def test_same_word_elsewhere_is_a_new_event(self):
        lookup = FakeRhymeLookup()
        render = RecordingRender()

        async def scenario():
            p = QueryPipeline(lookup, render, debounce_s=0.01)
            p.submit(CAT)
            await p.wait_idle()
            p.submit(WordAtPosition("cat", TextRange.on_line(3, 0, 3)))
            await p.wait_idle()

        asyncio.run(scenario())
        assert lookup.calls == ["cat", "cat"]

    def test_repeat_after_render_is_ignored(self):
        lookup = FakeRhymeLookup()

        async def scenario():
            p = QueryPipeline(lookup, RecordingRender(), debounce_s=0.01)
            p.submit(CAT)
            await p.wait_idle()
            p.submit(CAT)
            state = p.state
            await asyncio.sleep(0.03)
            return state

        assert asyncio.run(scenario()) is PipelineState.IDLE
        assert lookup.calls == ["cat"]

    def test_only_compared_against_last_seen(self):
        lookup = FakeRhymeLookup()

        async def scenario():
            p = QueryPipeline(lookup, RecordingRender(), debounce_s=0.01)
            for ev in (CAT, HAT, CAT):
                p.submit(ev)
                await p.wait_idle()

        asyncio.run(scenario())
        assert lookup.calls == ["cat", "hat", "cat"]


class TestSupersession:
    def test_slow_stale_result_never_rendered(self):
        lookup = FakeRhymeLookup({"cat": ["bat"], "hat": ["that"]})
        render = RecordingRender()

        async def scenario():
            gate = lookup.hold("cat")
            p = QueryPipeline(lookup, render, debounce_s=0.02)
            p.submit(CAT)
            await _until(lambda: lookup.calls == ["cat"])
            assert p.state is PipelineState.QUERYING

            p.submit(HAT)
            assert p.state is PipelineState.DEBOUNCING
            await p.wait_idle()
            assert render.calls == [(HAT, ["that"])]

            gate.set()
            await _until(lambda: "cat" in lookup.completed)
            await asyncio.sleep(0.01)
            return p

        p = asyncio.run(scenario())
        assert render.calls == [(HAT, ["that"])]
        assert p.state is PipelineState.IDLE

    def test_stale_result_during_debounce_dropped(self):
        lookup = FakeRhymeLookup({"cat": ["bat"], "hat": ["that"]})
        render = RecordingRender()

        async def scenario():
            gate = lookup.hold("cat")
            p = QueryPipeline(lookup, render, debounce_s=0.1)
            p.submit(CAT)
            await _until(lambda: lookup.calls == ["cat"])
            p.submit(HAT)
            gate.set()
            await _until(lambda: "cat" in lookup.completed)
            await asyncio.sleep(0.01)
            rendered_early = list(render.calls)
            await p.wait_idle()
            return rendered_early

        assert asyncio.run(scenario()) == []
        assert render.calls == [(HAT, ["that"])]


class TestRendering:
    def test_panel_replaced_in_collaborator_order(self):
        buf = TextBuffer("cat hat")
        panel = RhymePanel(buf)
        lookup = FakeRhymeLookup({"cat": ["bat", "at", "sat"], "hat": ["that", "chat"]})

        async def scenario():
            p = QueryPipeline(lookup, panel.show, debounce_s=0.01)
            p.submit(CAT)
            await p.wait_idle()
            assert panel.words() == ["bat", "at", "sat"]
            p.submit(HAT)
            await p.wait_idle()

        asyncio.run(scenario())
        assert panel.words() == ["that", "chat"]
        assert panel.searched == HAT

    def test_choosing_uses_captured_range(self):
        buf = TextBuffer("the cat sat")
        panel = RhymePanel(buf)
        lookup = FakeRhymeLookup({"cat": ["hat"]})

        async def scenario():
            p = QueryPipeline(lookup, panel.show, debounce_s=0.01)
            p.submit(WordAtPosition("cat", TextRange.on_line(0, 4, 7)))
            await p.wait_idle()

        asyncio.run(scenario())
        buf.blur()
        panel.choose(0)
        assert buf.get_text() == "the hat sat"
        assert buf.focused

    def test_failure_renders_empty_and_returns_to_idle(self):
        buf = TextBuffer("cat hat")
        panel = RhymePanel(buf)
        lookup = FakeRhymeLookup({"cat": ["bat"]})
        lookup.fail("hat")

        async def scenario():
            p = QueryPipeline(lookup, panel.show, debounce_s=0.01)
            p.submit(CAT)
            await p.wait_idle()
            p.submit(HAT)
            await p.wait_idle()
            return p

        p = asyncio.run(scenario())
        assert panel.words() == []
        assert panel.searched == HAT
        assert p.state is PipelineState.IDLE

    def test_unexpected_error_is_absorbed(self):
        render = RecordingRender()

        async def boom(word):
            raise RuntimeError("network down")

        async def scenario():
            p = QueryPipeline(boom, render, debounce_s=0.01)
            p.submit(CAT)
            await p.wait_idle()

        asyncio.run(scenario())
        assert render.calls == [(CAT, [])]


def test_close_cancels_pending_lookup():
    lookup = FakeRhymeLookup()

    async def scenario():
        p = QueryPipeline(lookup, RecordingRender(), debounce_s=0.02)
        p.submit(CAT)
        p.close()
        await asyncio.sleep(0.05)
        return p

    p = asyncio.run(scenario())
    assert lookup.calls == []
    assert p.state is PipelineState.IDLE


def test_reset_forgets_last_word_and_drops_timer():
    lookup = FakeRhymeLookup()
    render = RecordingRender()

    async def scenario():
        p = QueryPipeline(lookup, render, debounce_s=0.02)
        p.submit(CAT)
        p.reset()
        assert p.state is PipelineState.IDLE
        await asyncio.sleep(0.05)
        assert lookup.calls == []

        p.submit(CAT)
        await p.wait_idle()

    asyncio.run(scenario())
    assert lookup.calls == ["cat"]
    assert render.calls == [(CAT, [])]


def test_render_error_is_logged_and_pipeline_recovers(caplog):
    lookup = FakeRhymeLookup({"hat": ["that"]})
    render = RecordingRender()

    def flaky_render(event, candidates):
        if event.word == "cat":
            raise RuntimeError("widget gone")
        render(event, candidates)

    async def scenario():
        p = QueryPipeline(lookup, flaky_render, debounce_s=0.01)
        p.submit(CAT)
        await p.wait_idle()
        p.submit(HAT)
        await p.wait_idle()
        return p

    with caplog.at_level(logging.ERROR, logger="lyricistant.rhymes.pipeline"):
        p = asyncio.run(scenario())
    assert "Rendering rhymes for 'cat' failed" in caplog.text
    assert render.calls == [(HAT, ["that"])]
    assert p.state is PipelineState.IDLE

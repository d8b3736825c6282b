"""Tests for the timing engine and its state — sw.core.engine, sw.core.timer_state.

Time is driven by a fake millisecond clock and a manual ticker, so nothing
here sleeps.
"""

import os
import tempfile
import unittest

os.environ.setdefault("SW_DATA_DIR", tempfile.mkdtemp(prefix="sw-tests-"))


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


class ManualTicker:
    """Ticker that only fires when the test says so."""

    def __init__(self):
        self.callback = None
        self.starts = 0
        self.stops = 0

    @property
    def active(self):
        return self.callback is not None

    def start(self, callback):
        self.callback = callback
        self.starts += 1

    def stop(self):
        self.callback = None
        self.stops += 1

    def fire(self):
        if self.callback is not None:
            self.callback()


# ──────────────────────────────────────────────────────────────────────────
# timer_state.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestBreakdown(unittest.TestCase):

    def test_zero(self):
        from sw.core.timer_state import format_time
        self.assertEqual(format_time(0), "00:00:00:00")

    def test_all_fields(self):
        from sw.core.timer_state import breakdown
        parts = breakdown(1 * 3_600_000 + 2 * 60_000 + 3 * 1000 + 456)
        self.assertEqual(
            (parts.hours, parts.minutes, parts.seconds, parts.centiseconds),
            (1, 2, 3, 45))
        self.assertEqual(str(parts), "01:02:03:45")

    def test_centiseconds_truncate(self):
        from sw.core.timer_state import format_time
        self.assertEqual(format_time(25_509), "00:00:25:50")

    def test_negative_clamps_to_zero(self):
        from sw.core.timer_state import format_time
        self.assertEqual(format_time(-1500), "00:00:00:00")

    def test_hours_not_wrapped(self):
        from sw.core.timer_state import breakdown
        self.assertEqual(breakdown(100 * 3_600_000).hours, 100)


class TestTimerState(unittest.TestCase):

    def test_fresh_state(self):
        from sw.core.timer_state import TimerState, Mode
        st = TimerState()
        self.assertFalse(st.running)
        self.assertEqual(st.elapsed_ms, 0)
        self.assertIs(st.mode, Mode.STOPWATCH)
        self.assertEqual(st.entries, [])
        self.assertFalse(st.has_time)

    def test_separate_instances_do_not_share_entries(self):
        from sw.core.timer_state import TimerState, LogEntry, EntryKind
        a, b = TimerState(), TimerState()
        a.entries.append(LogEntry(1, EntryKind.SPLIT, 10))
        self.assertEqual(b.entries, [])

    def test_entry_labels(self):
        from sw.core.timer_state import LogEntry, EntryKind
        lap = LogEntry(3, EntryKind.LAP, 83_450, 10_120)
        split = LogEntry(4, EntryKind.SPLIT, 90_000)
        self.assertEqual(lap.number, "Lap 3")
        self.assertEqual(lap.segment_text, "00:00:10:12")
        self.assertEqual(split.number, "Split 4")
        self.assertEqual(split.segment_text, "")


# ──────────────────────────────────────────────────────────────────────────
# engine.py tests
# ──────────────────────────────────────────────────────────────────────────

class EngineTestCase(unittest.TestCase):

    def setUp(self):
        from sw.core.engine import TimingEngine
        self.clock = FakeClock()
        self.ticker = ManualTicker()
        self.statuses = []
        self.displays = []
        self.completions = 0

        def on_complete():
            self.completions += 1

        self.engine = TimingEngine(
            ticker=self.ticker,
            clock=self.clock,
            on_status=self.statuses.append,
            on_display=self.displays.append,
            on_complete=on_complete,
        )
        self.state = self.engine.state

    def at(self, ms):
        self.clock.now = ms
        return self


class TestStartPause(EngineTestCase):

    def test_pause_resume_preserves_accumulation(self):
        self.at(0).engine.start()
        self.at(100).engine.pause()
        self.assertEqual(self.state.elapsed_ms, 100)

        self.at(5_000).engine.start()
        self.at(5_050).engine.pause()
        self.assertEqual(self.state.elapsed_ms, 150)
        self.assertFalse(self.state.running)

    def test_tick_tracks_clock(self):
        self.at(1_000).engine.start()
        parts = self.engine.tick(4_250)
        self.assertEqual(self.state.elapsed_ms, 3_250)
        self.assertEqual(str(parts), "00:00:03:25")
        self.assertEqual(self.displays[-1], parts)

    def test_ticker_callback_reads_clock(self):
        self.at(0).engine.start()
        self.at(730)
        self.ticker.fire()
        self.assertEqual(self.state.elapsed_ms, 730)

    def test_start_while_running_is_noop(self):
        self.at(0).engine.start()
        self.at(500)
        self.assertFalse(self.engine.start())
        self.assertEqual(self.ticker.starts, 1)
        self.engine.tick()
        self.assertEqual(self.state.elapsed_ms, 500)

    def test_pause_while_idle_is_noop(self):
        self.assertFalse(self.engine.pause())
        self.assertEqual(self.statuses, [])

    def test_tick_while_idle_is_noop(self):
        self.assertIsNone(self.engine.tick(1_000))
        self.assertEqual(self.state.elapsed_ms, 0)

    def test_ticker_follows_running(self):
        self.at(0).engine.start()
        self.assertTrue(self.ticker.active)
        self.at(10).engine.pause()
        self.assertFalse(self.ticker.active)
        self.engine.start()
        self.assertTrue(self.ticker.active)
        self.engine.reset()
        self.assertFalse(self.ticker.active)

    def test_idle_reset_leaves_ticker_alone(self):
        self.engine.reset()
        self.assertEqual(self.ticker.stops, 0)
        self.at(0).engine.start()
        self.at(10).engine.pause()
        self.engine.reset()
        self.assertEqual(self.ticker.stops, 1)

    def test_status_messages(self):
        self.at(0).engine.start()
        self.at(10).engine.pause()
        self.engine.reset()
        self.assertEqual(self.statuses,
                         ["Stopwatch started", "Stopwatch paused", "Stopwatch reset"])

    def test_engine_without_ticker(self):
        from sw.core.engine import TimingEngine
        clock = FakeClock()
        engine = TimingEngine(clock=clock)
        engine.start()
        clock.now = 42
        engine.pause()
        self.assertEqual(engine.state.elapsed_ms, 42)

    def test_injected_state_is_used(self):
        from sw.core.engine import TimingEngine
        from sw.core.timer_state import TimerState
        st = TimerState(elapsed_ms=1_000)
        engine = TimingEngine(state=st, clock=self.clock)
        self.at(0)
        engine.start()
        engine.tick(500)
        self.assertIs(engine.state, st)
        self.assertEqual(st.elapsed_ms, 1_500)


class TestReset(EngineTestCase):

    def test_reset_clears_everything(self):
        self.engine.arm_countdown(60_000)
        self.at(0).engine.start()
        self.at(1_000).engine.record_lap()
        self.engine.record_split()

        self.engine.reset()
        from sw.core.timer_state import Mode
        self.assertFalse(self.state.running)
        self.assertEqual(self.state.elapsed_ms, 0)
        self.assertEqual(self.state.entries, [])
        self.assertEqual(self.state.lap_count, 0)
        self.assertEqual(self.state.last_lap_mark_ms, 0)
        self.assertEqual(self.state.preset_ms, 0)
        self.assertIs(self.state.mode, Mode.STOPWATCH)
        self.assertEqual(str(self.displays[-1]), "00:00:00:00")

    def test_reset_is_idempotent(self):
        self.engine.reset()
        self.engine.reset()
        self.assertEqual(self.state.elapsed_ms, 0)
        self.assertEqual(self.state.entries, [])
        self.assertFalse(self.state.running)

    def test_indices_restart_after_reset(self):
        self.at(0).engine.start()
        self.at(100).engine.record_lap()
        self.engine.reset()
        self.at(200).engine.start()
        entry = self.at(300).engine.record_lap()
        self.assertEqual(entry.index, 1)
        self.assertEqual(entry.segment_ms, 100)


class TestLapsAndSplits(EngineTestCase):

    def test_segments_ignore_interleaved_splits(self):
        self.at(0).engine.start()
        lap1 = self.at(10_000).engine.record_lap()
        split = self.at(15_000).engine.record_split()
        lap2 = self.at(25_500).engine.record_lap()

        self.assertEqual((lap1.index, split.index, lap2.index), (1, 2, 3))
        self.assertEqual(lap1.segment_ms, 10_000)
        self.assertIsNone(split.segment_ms)
        self.assertEqual(lap2.total_ms, 25_500)
        self.assertEqual(lap2.segment_ms, 15_500)

    def test_entries_newest_first(self):
        self.at(0).engine.start()
        self.at(1_000).engine.record_lap()
        self.at(2_000).engine.record_split()
        self.at(3_000).engine.record_lap()
        self.assertEqual([e.index for e in self.state.entries], [3, 2, 1])

    def test_split_leaves_lap_mark_alone(self):
        self.at(0).engine.start()
        self.at(4_000).engine.record_lap()
        self.at(9_000).engine.record_split()
        self.assertEqual(self.state.last_lap_mark_ms, 4_000)

    def test_guard_when_idle(self):
        self.assertIsNone(self.engine.record_lap())
        self.assertIsNone(self.engine.record_split())
        self.assertEqual(self.state.entries, [])
        self.assertEqual(self.state.lap_count, 0)

    def test_allowed_while_paused_with_time(self):
        self.at(0).engine.start()
        self.at(2_000).engine.pause()
        self.at(9_999)
        entry = self.engine.record_lap()
        self.assertEqual(entry.total_ms, 2_000)
        self.assertEqual(entry.segment_ms, 2_000)

    def test_lap_status_message(self):
        self.at(0).engine.start()
        self.at(83_450).engine.record_lap()
        self.at(90_000).engine.record_split()
        self.assertIn("Lap 1 recorded: Total time 00:01:23:45, Segment time 00:01:23:45",
                      self.statuses)
        self.assertEqual(self.statuses[-1], "Split 2 recorded: 00:01:30:00")


class TestCountdown(EngineTestCase):

    def test_arm_shows_full_duration(self):
        from sw.core.timer_state import Mode
        self.engine.arm_countdown(5_000)
        self.assertIs(self.state.mode, Mode.COUNTDOWN)
        self.assertEqual(self.state.preset_ms, 5_000)
        self.assertEqual(self.state.elapsed_ms, 5_000)
        self.assertFalse(self.state.running)
        self.assertEqual(str(self.displays[-1]), "00:00:05:00")
        self.assertEqual(self.statuses[-1], "Timer preset set to 00:00:05:00")

    def test_arm_clears_previous_run(self):
        self.at(0).engine.start()
        self.at(700).engine.record_lap()
        self.engine.arm_countdown(5_000)
        self.assertEqual(self.state.entries, [])
        self.assertFalse(self.ticker.active)

    def test_counts_down(self):
        self.engine.arm_countdown(5_000)
        self.at(0).engine.start()
        self.engine.tick(4_000)
        self.assertEqual(self.state.elapsed_ms, 1_000)

    def test_completes_exactly_once(self):
        self.engine.arm_countdown(5_000)
        self.at(0).engine.start()
        self.engine.tick(5_001)

        self.assertEqual(self.state.elapsed_ms, 0)
        self.assertFalse(self.state.running)
        self.assertFalse(self.ticker.active)
        self.assertEqual(self.completions, 1)
        self.assertEqual(self.statuses[-1], "Timer complete!")

        self.assertIsNone(self.engine.tick(6_000))
        self.ticker.fire()
        self.assertEqual(self.completions, 1)

    def test_pause_resume_keeps_remaining(self):
        self.engine.arm_countdown(5_000)
        self.at(0).engine.start()
        self.at(2_000).engine.pause()
        self.assertEqual(self.state.elapsed_ms, 3_000)

        self.at(10_000).engine.start()
        self.engine.tick(11_000)
        self.assertEqual(self.state.elapsed_ms, 2_000)

    def test_pause_after_deadline_completes(self):
        self.engine.arm_countdown(1_000)
        self.at(0).engine.start()
        self.assertTrue(self.at(3_000).engine.pause())
        self.assertEqual(self.completions, 1)
        self.assertEqual(self.state.elapsed_ms, 0)

    def test_finished_countdown_will_not_restart(self):
        self.engine.arm_countdown(1_000)
        self.at(0).engine.start()
        self.engine.tick(1_000)
        self.assertFalse(self.engine.start())
        self.assertEqual(self.completions, 1)

    def test_zero_preset_start_is_noop(self):
        self.engine.arm_countdown(0)
        self.assertFalse(self.at(0).engine.start())
        self.assertFalse(self.state.running)
        self.assertEqual(self.ticker.starts, 0)
        self.assertEqual(self.completions, 0)

    def test_lap_after_deadline_is_noop(self):
        self.engine.arm_countdown(5_000)
        self.at(0).engine.start()
        self.assertIsNone(self.at(6_000).engine.record_lap())
        self.assertEqual(self.state.entries, [])
        self.assertEqual(self.state.lap_count, 0)
        self.assertEqual(self.completions, 1)
        self.assertEqual(self.statuses[-1], "Timer complete!")

    def test_split_after_deadline_is_noop(self):
        self.engine.arm_countdown(5_000)
        self.at(0).engine.start()
        self.assertIsNone(self.at(5_000).engine.record_split())
        self.assertEqual(self.state.entries, [])
        self.assertEqual(self.completions, 1)
        self.assertEqual(self.statuses[-1], "Timer complete!")

    def test_negative_preset_rejected(self):
        with self.assertRaises(ValueError):
            self.engine.arm_countdown(-1)

    def test_countdown_lap_segments_positive(self):
        self.engine.arm_countdown(10_000)
        self.at(0).engine.start()
        first = self.at(2_000).engine.record_lap()
        second = self.at(5_000).engine.record_lap()
        self.assertEqual(first.total_ms, 8_000)
        self.assertEqual(second.total_ms, 5_000)
        self.assertEqual(second.segment_ms, 3_000)


if __name__ == "__main__":
    unittest.main()

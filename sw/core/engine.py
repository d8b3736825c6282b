import time
from sw.common.logger import log
from sw.core.timer_state import TimerState, Mode, EntryKind, LogEntry, breakdown, format_time


# Monotonic milliseconds, so wall-clock changes never bend the elapsed time.
def monotonic_ms():
    return int(time.monotonic() * 1000)


# The stopwatch itself. Owns exactly one TimerState (passed in or freshly built) and drives an optional Ticker
# for the display refresh. Collaborators hear about changes through three callbacks:
#   on_status(str)         - human readable message for the live region, newest replaces the last
#   on_display(Breakdown)  - after every tick and every operation that changes the shown time
#   on_complete()          - countdown hit zero
# Every operation is synchronous. On a threaded host, call them all from the one thread that owns the engine.
class TimingEngine:

    def __init__(self, state=None, ticker=None, clock=monotonic_ms,
                 on_status=None, on_display=None, on_complete=None):
        self.state = state if state is not None else TimerState()
        self.ticker = ticker
        self.clock = clock
        self.on_status = on_status
        self.on_display = on_display
        self.on_complete = on_complete
        # Instant the current counting phase is measured from, in clock milliseconds.
        self._reference_ms = None

    #region === Notifications ===

    def _announce(self, message):
        log.debug(f"Status: {message}")
        if self.on_status is not None:
            self.on_status(message)

    def _display(self, ms):
        parts = breakdown(ms)
        if self.on_display is not None:
            self.on_display(parts)
        return parts

    #endregion === Notifications ===

    #region === Running and stopping ===

    # Begins (or resumes) counting. The reference instant is set back by whatever has already been used up, so a
    # pause/resume pair never loses time.
    def start(self):
        st = self.state
        if st.running:
            return False
        if st.mode is Mode.COUNTDOWN and st.elapsed_ms <= 0:
            log.debug("Ignoring start on a finished countdown")
            return False

        now = self.clock()
        if st.mode is Mode.COUNTDOWN:
            self._reference_ms = now - (st.preset_ms - st.elapsed_ms)
        else:
            self._reference_ms = now - st.elapsed_ms
        st.running = True
        if self.ticker is not None:
            self.ticker.start(self.tick)
        log.debug(f"Started in {st.mode.value} mode at {now} with {st.elapsed_ms}ms on the clock")
        self._announce("Stopwatch started")
        return True

    def pause(self):
        st = self.state
        if not st.running:
            return False
        # Catch the accumulator up to this instant first. For a countdown that can be the final tick.
        self.tick()
        if not st.running:
            return True
        self._halt()
        log.debug(f"Paused at {st.elapsed_ms}ms")
        self._display(st.elapsed_ms)
        self._announce("Stopwatch paused")
        return True

    def reset(self):
        self._clear()
        log.debug("Reset to zero")
        self._display(0)
        self._announce("Stopwatch reset")

    # Drops back to the idle stopwatch, without telling anyone about it.
    def _clear(self):
        self._halt()
        self.state.clear()

    def _halt(self):
        if self.ticker is not None and self.ticker.active:
            self.ticker.stop()
        self.state.running = False
        self._reference_ms = None

    def _complete(self):
        self.state.elapsed_ms = 0
        self._halt()
        log.info("Countdown complete")
        self._display(0)
        self._announce("Timer complete!")
        if self.on_complete is not None:
            self.on_complete()

    # Recomputes elapsed_ms from the clock. Called by the ticker, and by the operations that need an up-to-date
    # reading. Returns the Breakdown that was pushed to the display, or None when not running.
    def tick(self, now_ms=None):
        st = self.state
        if not st.running:
            return None
        now = self.clock() if now_ms is None else now_ms
        passed = now - self._reference_ms

        if st.mode is Mode.COUNTDOWN:
            remaining = st.preset_ms - passed
            if remaining <= 0:
                self._complete()
                return breakdown(0)
            st.elapsed_ms = remaining
        else:
            st.elapsed_ms = max(0, passed)
        return self._display(st.elapsed_ms)

    #endregion === Running and stopping ===

    #region === Laps and splits ===

    def record_lap(self):
        st = self.state
        # Catch up first: a countdown that runs out on this reading leaves nothing to record.
        self.tick()
        if not st.has_time:
            return None

        st.lap_count += 1
        # abs() keeps countdown segments positive: there the accumulator runs downwards.
        segment = abs(st.elapsed_ms - st.last_lap_mark_ms)
        entry = LogEntry(st.lap_count, EntryKind.LAP, st.elapsed_ms, segment)
        st.entries.insert(0, entry)
        st.last_lap_mark_ms = st.elapsed_ms

        self._announce(f"Lap {entry.index} recorded: Total time {entry.total_text}, "
                       f"Segment time {entry.segment_text}")
        return entry

    # Splits are always measured from the start, so last_lap_mark_ms is left alone.
    def record_split(self):
        st = self.state
        self.tick()
        if not st.has_time:
            return None

        st.lap_count += 1
        entry = LogEntry(st.lap_count, EntryKind.SPLIT, st.elapsed_ms)
        st.entries.insert(0, entry)

        self._announce(f"Split {entry.index} recorded: {entry.total_text}")
        return entry

    #endregion === Laps and splits ===

    #region === Countdown ===

    def arm_countdown(self, preset_ms):
        preset_ms = int(preset_ms)
        if preset_ms < 0:
            raise ValueError(f"Countdown preset must not be negative, got {preset_ms}")
        self._clear()
        st = self.state
        st.mode = Mode.COUNTDOWN
        st.preset_ms = preset_ms
        st.elapsed_ms = preset_ms
        log.debug(f"Armed countdown for {preset_ms}ms")
        self._display(preset_ms)
        self._announce(f"Timer preset set to {format_time(preset_ms)}")

    #endregion === Countdown ===

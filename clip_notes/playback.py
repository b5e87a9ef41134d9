"""
Virtual playback over a Video Surface.

The controller owns no clock. The surface reports its position roughly every
100ms through `on_time_sample()`, and every state change happens inside
that call or inside one of the user commands (play, pause, seek, next, prev).

Seeks take a few samples to show up. After each seek the controller records
`last_seek_time` and ignores samples until one lands near that target (or
inside the target clip), so a burst of samples straddling a clip boundary
produces a single seek, and the controller never fights a seek the user just
made.
"""

import logging
from typing import Callable, Optional, Sequence

from .config import Settings
from .models import Clip, PlaybackState
from .surface import VideoSurface
from .timeline import VirtualTimeline, build_timeline

logger = logging.getLogger(__name__)


class PlaybackController:
    """Plays a list of clips back-to-back on one surface. One instance per session."""

    def __init__(
        self,
        surface: VideoSurface,
        clips: Sequence[Clip] = (),
        settings: Optional[Settings] = None,
        on_clip_change: Optional[Callable[[int], None]] = None,
    ):
        """
        Args:
            surface: Player to command and sample
            clips: Clips in playback order
            settings: Timing thresholds (defaults tuned for ~10Hz samples)
            on_clip_change: Called with the new clip index whenever it changes
        """
        self.surface = surface
        self.settings = settings or Settings()
        self.on_clip_change = on_clip_change

        self._clips: list[Clip] = list(clips)
        self._timeline: VirtualTimeline = build_timeline(self._clips)
        self._state = PlaybackState.IDLE
        self._index = -1
        self._last_sample: Optional[float] = None

        # Seek bookkeeping
        self._last_seek_time: Optional[float] = None
        self._seek_clip = -1
        self._seek_settled = True
        self._stale_samples = 0

        self._unsubscribe: Optional[Callable[[], None]] = None

    # ── read-only state ─────────────────────────────────────────────────────

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_clip_index(self) -> int:
        return self._index

    @property
    def current_virtual_time(self) -> float:
        known = self._known_position()
        if known is None:
            return 0.0
        return self._timeline.actual_to_virtual(known)

    @property
    def total_virtual_duration(self) -> float:
        return self._timeline.total_virtual_duration

    @property
    def timeline(self) -> VirtualTimeline:
        return self._timeline

    @property
    def clips(self) -> tuple[Clip, ...]:
        return tuple(self._clips)

    @property
    def last_seek_time(self) -> Optional[float]:
        return self._last_seek_time

    # ── wiring ──────────────────────────────────────────────────────────────

    def bind(self) -> "PlaybackController":
        """Subscribe to the surface's progress stream."""
        if self._unsubscribe is None:
            self._unsubscribe = self.surface.on_progress(self.on_time_sample)
        return self

    def unbind(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def update_clips(self, clips: Sequence[Clip]):
        """
        Swap in a freshly parsed clip list.

        Clip positions may have shifted, so the current index is cleared and
        re-derived from the next time sample.
        """
        self._clips = list(clips)
        self._timeline = build_timeline(self._clips)
        self._seek_settled = True
        self._seek_clip = -1
        self._set_index(-1)

        if not self._clips and self._state is PlaybackState.PLAYING:
            self.surface.pause()
        if not self._clips or self._state is PlaybackState.FINISHED:
            self._state = PlaybackState.IDLE

    # ── commands ────────────────────────────────────────────────────────────

    def play(self):
        ranges = self._timeline.ranges
        if not ranges:
            return

        t = self._position()
        found = self._timeline.index_at(t)

        restart = found < 0
        if self._state is PlaybackState.FINISHED:
            # Parked on the final edge: resuming would finish again immediately
            restart = restart or t >= ranges[-1].actual_end - self.settings.epsilon

        if restart:
            self._seek(ranges[0].actual_start, 0)
            self._set_index(0)
        elif self._index < 0 or not self._in_range(self._index, t):
            self._set_index(found)

        self.surface.play()
        self._state = PlaybackState.PLAYING

    def pause(self):
        self.surface.pause()
        if self._state is PlaybackState.PLAYING:
            self._state = PlaybackState.IDLE

    def toggle(self):
        if self._state is PlaybackState.PLAYING:
            self.pause()
        else:
            self.play()

    def seek_virtual(self, virtual_time: float):
        """Seek to a point on the virtual timeline."""
        if not self._timeline.ranges:
            return

        target = self._timeline.virtual_to_actual(virtual_time)
        if self._is_redundant_seek(target.actual_time):
            logger.debug("Skipping redundant seek to %.2fs", target.actual_time)
            return

        self._seek(target.actual_time, target.clip_index)
        self._set_index(target.clip_index)
        self._clear_finished()

    def skip_forward(self, seconds: Optional[float] = None):
        step = self.settings.skip_seconds if seconds is None else seconds
        self.seek_virtual(min(self.current_virtual_time + step, self.total_virtual_duration))

    def skip_backward(self, seconds: Optional[float] = None):
        step = self.settings.skip_seconds if seconds is None else seconds
        self.seek_virtual(max(self.current_virtual_time - step, 0.0))

    def next(self):
        if not self._timeline.ranges:
            return
        last = len(self._timeline) - 1
        self._seek_to_clip(min(last, self._index + 1))

    def prev(self):
        if not self._timeline.ranges:
            return

        if self._index >= 0:
            current = self._timeline.ranges[self._index]
            if self._position() - current.actual_start > self.settings.prev_restart_threshold:
                self._seek_to_clip(self._index)
                return

        self._seek_to_clip(max(0, self._index - 1))

    def jump_to_clip(self, index: int):
        """Seek to the start of a clip and play from there."""
        if not 0 <= index < len(self._timeline):
            return
        self._seek_to_clip(index)
        self.surface.play()
        self._state = PlaybackState.PLAYING

    # ── sampling ────────────────────────────────────────────────────────────

    def on_time_sample(self, seconds: float):
        """Feed the surface's current position. Call on every progress tick."""
        self._last_sample = seconds
        if not self._timeline.ranges:
            return

        if not self._seek_settled and not self._settle(seconds):
            return

        if self._state is not PlaybackState.PLAYING:
            found = self._timeline.index_at(seconds)
            if found >= 0 or self._state is PlaybackState.IDLE:
                self._set_index(found)
            return

        if self._index < 0 or not self._in_range(self._index, seconds):
            found = self._timeline.index_at(seconds)
            if found < 0:
                self._snap_forward(seconds)
                return
            self._set_index(found)

        current = self._timeline.ranges[self._index]
        if seconds >= current.actual_end - self.settings.epsilon:
            if self._index + 1 < len(self._timeline):
                self._seek_to_clip(self._index + 1)
            else:
                self._finish()

    # ── internals ───────────────────────────────────────────────────────────

    def _known_position(self) -> Optional[float]:
        # A pending seek is where the surface is headed, whatever it last reported
        if not self._seek_settled:
            return self._last_seek_time
        return self._last_sample

    def _position(self) -> float:
        known = self._known_position()
        if known is not None:
            return known
        return self.surface.get_current_time()

    def _in_range(self, index: int, seconds: float) -> bool:
        r = self._timeline.ranges[index]
        return r.actual_start <= seconds < r.actual_end

    def _set_index(self, index: int):
        if index != self._index:
            self._index = index
            if self.on_clip_change:
                self.on_clip_change(index)

    def _seek(self, seconds: float, clip_index: int):
        logger.debug("Seeking to %.2fs (clip %d)", seconds, clip_index)
        self.surface.seek_to(seconds)
        self._last_seek_time = seconds
        self._seek_clip = clip_index
        self._seek_settled = False
        self._stale_samples = 0

    def _seek_to_clip(self, index: int):
        self._seek(self._timeline.ranges[index].actual_start, index)
        self._set_index(index)
        self._clear_finished()

    def _settle(self, seconds: float) -> bool:
        """Whether a sample shows the last seek has landed. Stale samples are counted."""
        landed = abs(seconds - self._last_seek_time) <= self.settings.seek_guard
        if not landed and 0 <= self._seek_clip < len(self._timeline):
            r = self._timeline.ranges[self._seek_clip]
            landed = r.actual_start <= seconds <= r.actual_end

        if not landed:
            self._stale_samples += 1
            if self._stale_samples < self.settings.seek_settle_samples:
                return False
            logger.debug("Seek to %.2fs never showed up, resyncing", self._last_seek_time)

        self._seek_settled = True
        return True

    def _is_redundant_seek(self, seconds: float) -> bool:
        return (
            self._last_seek_time is not None
            and abs(seconds - self._last_seek_time) < self.settings.seek_dedup
        )

    def _snap_forward(self, seconds: float):
        """Playing outside every clip: jump to the next clip, or stop past the last."""
        virtual_time = self._timeline.actual_to_virtual(seconds)
        if virtual_time >= self._timeline.total_virtual_duration:
            self._finish()
            return
        target = self._timeline.virtual_to_actual(virtual_time)
        self._seek_to_clip(target.clip_index)

    def _finish(self):
        self.surface.pause()
        self._state = PlaybackState.FINISHED
        logger.info("Virtual playback finished (%d clips)", len(self._timeline))

    def _clear_finished(self):
        if self._state is PlaybackState.FINISHED:
            self._state = PlaybackState.IDLE

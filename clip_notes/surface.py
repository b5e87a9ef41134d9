"""
Video Surface: the playable media the controller commands and samples.

Any backend (embedded web player, native element, desktop player) can drive
virtual playback as long as it satisfies `VideoSurface`. `SimulatedSurface`
is an in-process stand-in with no real media, advanced by explicit ticks.
"""

import logging
from typing import Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@runtime_checkable
class VideoSurface(Protocol):
    def seek_to(self, seconds: float) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def get_current_time(self) -> float: ...

    def get_duration(self) -> float: ...

    def on_progress(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register a per-tick time callback. Returns an unsubscribe function."""
        ...


class SimulatedSurface:
    """
    Clock-free video surface.

    Time only moves when `tick()` is called, and every tick reports the
    current position to progress listeners, the way a player's ~10Hz
    progress event would. Commands sent before `mark_ready()` are dropped,
    like a player that has not finished loading.
    """

    def __init__(self, duration: float, ready: bool = True):
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self.duration = float(duration)
        self.ready = ready
        self.playing = False
        self._time = 0.0
        self._listeners: list[ProgressCallback] = []

    def mark_ready(self):
        self.ready = True

    def _accepts(self, command: str) -> bool:
        if not self.ready:
            logger.debug("Surface not ready, dropping %s", command)
        return self.ready

    def seek_to(self, seconds: float) -> None:
        if self._accepts("seek"):
            self._time = min(max(0.0, seconds), self.duration)

    def play(self) -> None:
        if self._accepts("play"):
            self.playing = self._time < self.duration

    def pause(self) -> None:
        if self._accepts("pause"):
            self.playing = False

    def get_current_time(self) -> float:
        return self._time

    def get_duration(self) -> float:
        return self.duration

    def on_progress(self, callback: ProgressCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def tick(self, dt: float) -> float:
        """Advance playback by `dt` seconds and notify listeners. Returns the new time."""
        if self.playing:
            self._time = min(self._time + dt, self.duration)
            if self._time >= self.duration:
                self.playing = False
        for callback in list(self._listeners):
            callback(self._time)
        return self._time

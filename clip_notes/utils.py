"""Terminal helpers for clip-notes."""

import itertools
import sys
import threading
import time
from typing import Sequence, TextIO

from .timestamps import format_timestamp
from .timeline import VirtualTimeline


class Spinner:
    """Animated spinner for slow calls (AI requests)."""

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

    def __init__(self, message: str = "", stream: TextIO = sys.stdout):
        self.message = message
        self.stream = stream
        self._stop = threading.Event()
        self._thread = None

    def _spin(self):
        for frame in itertools.cycle(self.FRAMES):
            if self._stop.is_set():
                break
            self.stream.write(f"\r{frame} {self.message}")
            self.stream.flush()
            time.sleep(0.1)

    def start(self):
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()

    def stop(self, final_message: str = ""):
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        self.stream.write(f"\r{' ' * (len(self.message) + 5)}\r")
        if final_message:
            self.stream.write(final_message + "\n")
        self.stream.flush()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()


class TimelineBar:
    """
    One-line virtual timeline with clip boundaries.

        ▶ [████│██░░░│░░░░░░] 0:42.0 / 2:15.0  2/3 Highlight
    """

    def __init__(self, timeline: VirtualTimeline, labels: Sequence[str], width: int = 40,
                 stream: TextIO = sys.stdout):
        self.timeline = timeline
        self.labels = list(labels)
        self.width = width
        self.stream = stream

    def _boundary_columns(self) -> set[int]:
        total = self.timeline.total_virtual_duration
        if total <= 0:
            return set()
        return {
            int(self.width * r.virtual_start / total)
            for r in self.timeline.ranges[1:]
        }

    def render(self, virtual_time: float, clip_index: int, playing: bool = True) -> str:
        total = self.timeline.total_virtual_duration
        percent = min(virtual_time / total, 1.0) if total > 0 else 0.0
        filled = int(self.width * percent)
        boundaries = self._boundary_columns()

        cells = []
        for col in range(self.width):
            if col in boundaries:
                cells.append("│")
            else:
                cells.append("█" if col < filled else "░")

        icon = "▶" if playing else "⏸"
        position = f"{format_timestamp(virtual_time)} / {format_timestamp(total)}"
        label = ""
        if 0 <= clip_index < len(self.labels):
            label = f"  {clip_index + 1}/{len(self.labels)} {self.labels[clip_index][:30]}"
        return f"{icon} [{''.join(cells)}] {position}{label}"

    def update(self, virtual_time: float, clip_index: int, playing: bool = True):
        self.stream.write("\r" + self.render(virtual_time, clip_index, playing) + "\033[K")
        self.stream.flush()

    def finish(self):
        self.stream.write("\n")
        self.stream.flush()

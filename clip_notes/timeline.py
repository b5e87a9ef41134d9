"""
Virtual timeline: the clips played back-to-back with no gaps.

Actual time is a position in the source video. Virtual time is a position in
the concatenation of all clips, in list order (not sorted by time).

Lookups are intentionally asymmetric at clip edges:
- actual_to_virtual() treats a clip as [start, end] (end inclusive)
- virtual_to_actual() treats a clip as [start, end) (end exclusive)

So the last instant of one clip maps forward onto the first instant of the
next clip, which is what lets a playhead parked on a boundary snap ahead.
"""

from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .models import Clip, VirtualRange


class TimelinePosition(NamedTuple):
    actual_time: float
    clip_index: int


@dataclass(frozen=True)
class VirtualTimeline:
    """Ranges for one generation of clips, plus point lookups between time spaces."""

    total_virtual_duration: float
    ranges: tuple[VirtualRange, ...]

    def __len__(self) -> int:
        return len(self.ranges)

    def actual_to_virtual(self, seconds: float) -> float:
        for r in self.ranges:
            if r.actual_start <= seconds <= r.actual_end:
                return r.virtual_start + (seconds - r.actual_start)

        # Between clips: snap forward to the next clip in list order
        for r in self.ranges:
            if r.actual_start > seconds:
                return r.virtual_start

        return self.total_virtual_duration

    def virtual_to_actual(self, virtual_time: float) -> TimelinePosition:
        for r in self.ranges:
            if r.virtual_start <= virtual_time < r.virtual_end:
                return TimelinePosition(
                    r.actual_start + (virtual_time - r.virtual_start), r.clip_index
                )

        if self.ranges:
            last = self.ranges[-1]
            return TimelinePosition(last.actual_end, last.clip_index)
        return TimelinePosition(0.0, -1)

    def index_at(self, seconds: float) -> int:
        """Index of the first clip playing at `seconds`, or -1."""
        for r in self.ranges:
            if r.actual_start <= seconds < r.actual_end:
                return r.clip_index
        return -1


def build_timeline(clips: Sequence[Clip]) -> VirtualTimeline:
    ranges = []
    accumulated = 0.0

    for i, clip in enumerate(clips):
        start = accumulated
        accumulated += clip.duration
        ranges.append(
            VirtualRange(
                clip_index=i,
                actual_start=clip.start_time,
                actual_end=clip.end_time,
                virtual_start=start,
                virtual_end=accumulated,
            )
        )

    return VirtualTimeline(total_virtual_duration=accumulated, ranges=tuple(ranges))

"""Data models for clip-notes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Clip:
    """A labeled slice of the source video, produced from one note line."""

    id: str
    start_time: float  # seconds
    end_time: float  # seconds
    text: str = ""

    def __post_init__(self):
        if self.start_time < 0:
            raise ValueError(f"Clip {self.id} starts before 0: {self.start_time}")
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Clip {self.id} must end after it starts "
                f"({self.start_time} -> {self.end_time})"
            )

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, seconds: float) -> bool:
        return self.start_time <= seconds < self.end_time


class TokenKind(str, Enum):
    """How a timestamp was written on its note line."""

    RANGE = "range"
    SINGLE = "single"


@dataclass(frozen=True)
class NoteToken:
    """One timestamped note line, before end times are inferred."""

    kind: TokenKind
    start: float
    label: str
    line_index: int
    end: Optional[float] = None  # only set for RANGE tokens


@dataclass(frozen=True)
class VirtualRange:
    """Where a clip sits on the source video and on the virtual timeline."""

    clip_index: int
    actual_start: float
    actual_end: float
    virtual_start: float
    virtual_end: float
    duration: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "duration", self.actual_end - self.actual_start)


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    FINISHED = "finished"

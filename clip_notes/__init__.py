"""ClipNote - Turn timestamped video notes into clips and play them back-to-back."""

from .models import Clip, NoteToken, PlaybackState, TokenKind, VirtualRange
from .parser import parse_notes, scan_notes, tokens_to_clips
from .timeline import TimelinePosition, VirtualTimeline, build_timeline
from .playback import PlaybackController
from .surface import SimulatedSurface, VideoSurface
from .config import Settings

__all__ = [
    "Clip",
    "NoteToken",
    "PlaybackState",
    "TokenKind",
    "VirtualRange",
    "parse_notes",
    "scan_notes",
    "tokens_to_clips",
    "TimelinePosition",
    "VirtualTimeline",
    "build_timeline",
    "PlaybackController",
    "SimulatedSurface",
    "VideoSurface",
    "Settings",
]

"""
Turn free-form timestamped notes into clips.

Parsing happens in two passes. `scan_notes` reads the text line by line and
yields a `NoteToken` for every line carrying a timestamp. `tokens_to_clips`
then infers missing end times and builds the final `Clip` list.

    0:30 - 1:45 Intro          range: explicit end
    2:00 Highlight             single: ends where the next note starts
    3:10 Outro // cut here     trailing comments are ignored
"""

import logging
from typing import Iterator, Optional, Sequence

from .models import Clip, NoteToken, TokenKind
from .timestamps import match_range, match_single, strip_comment

logger = logging.getLogger(__name__)

# Length given to a trailing single-timestamp note when the video length is unknown
DEFAULT_TAIL_SECONDS = 60.0


def scan_notes(text: str) -> Iterator[NoteToken]:
    """Yield one token per timestamped line, in line order."""
    if not text or not isinstance(text, str):
        return

    for line_index, raw_line in enumerate(text.splitlines()):
        line = strip_comment(raw_line).strip()
        if not line:
            continue

        ranged = match_range(line)
        if ranged:
            start, end, label = ranged
            yield NoteToken(
                kind=TokenKind.RANGE,
                start=start,
                end=end,
                label=label,
                line_index=line_index,
            )
            continue

        single = match_single(line)
        if single:
            start, label = single
            yield NoteToken(
                kind=TokenKind.SINGLE,
                start=start,
                label=label,
                line_index=line_index,
            )


def tokens_to_clips(
    tokens: Sequence[NoteToken],
    video_duration: Optional[float] = None,
) -> list[Clip]:
    """
    Resolve end times and build clips.

    Args:
        tokens: Scanned note tokens, in playback order
        video_duration: Length of the source video, used to close a trailing
            single-timestamp note

    Returns:
        Clips with dense ids clip-0..clip-(k-1). Notes that would end at or
        before their start are dropped.
    """
    clips: list[Clip] = []

    for i, token in enumerate(tokens):
        if token.kind is TokenKind.RANGE:
            end = token.end
        elif i + 1 < len(tokens):
            end = tokens[i + 1].start
        elif video_duration is not None and video_duration > token.start:
            end = float(video_duration)
        else:
            end = token.start + DEFAULT_TAIL_SECONDS

        if end is None or end <= token.start:
            logger.debug(
                "Dropping note on line %d: %.2f -> %s", token.line_index + 1, token.start, end
            )
            continue

        n = len(clips)
        clips.append(
            Clip(
                id=f"clip-{n}",
                start_time=token.start,
                end_time=end,
                text=token.label or f"Clip {n + 1}",
            )
        )

    return clips


def parse_notes(text: str, video_duration: Optional[float] = None) -> list[Clip]:
    """Parse note text into an ordered list of clips. Never raises on bad text."""
    return tokens_to_clips(list(scan_notes(text)), video_duration)

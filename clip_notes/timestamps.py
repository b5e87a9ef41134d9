"""Timestamp tokens and comment handling for note lines."""

import re
from typing import Optional


def _timestamp_pattern(prefix: str) -> str:
    # [H:]M:SS[.fraction]
    return (
        rf"(?:(?P<{prefix}h>\d{{1,2}}):)?"
        rf"(?P<{prefix}m>\d{{1,2}}):(?P<{prefix}s>\d{{2}})"
        rf"(?:\.(?P<{prefix}f>\d+))?"
    )


RANGE_RE = re.compile(
    r"(?<![\d:.])"
    + _timestamp_pattern("a")
    + r"\s*[-–—~]\s*"
    + _timestamp_pattern("b")
    + r"(?![\d:])"
)

SINGLE_RE = re.compile(
    r"(?:^|(?<=[\s\[(]))"
    + _timestamp_pattern("a")
    + r"(?=$|[\s\])])"
)

# First "//" that is not part of "://", or the first "#"
COMMENT_RE = re.compile(r"(?<!:)//|#")

LABEL_PUNCTUATION = "-–—~:|"
BULLETS = "*•"


def strip_comment(line: str) -> str:
    """Drop a trailing // or # comment, leaving URLs intact."""
    match = COMMENT_RE.search(line)
    if match:
        return line[: match.start()]
    return line


def _group_seconds(match: re.Match, prefix: str) -> float:
    hours = match.group(f"{prefix}h")
    minutes = int(match.group(f"{prefix}m"))
    seconds = int(match.group(f"{prefix}s"))
    fraction = match.group(f"{prefix}f")

    total = minutes * 60 + seconds
    if hours is not None:
        total += int(hours) * 3600
    if fraction:
        total += float(f"0.{fraction}")
    return float(total)


def _clean_label(text: str) -> str:
    return text.strip().lstrip(LABEL_PUNCTUATION).strip()


def match_range(line: str) -> Optional[tuple[float, float, str]]:
    """Match `start - end label`. Returns (start, end, label) or None."""
    match = RANGE_RE.search(line)
    if not match:
        return None
    label = _clean_label(line[match.end():])
    return _group_seconds(match, "a"), _group_seconds(match, "b"), label


def match_single(line: str) -> Optional[tuple[float, str]]:
    """Match a lone timestamp token. Returns (start, label) or None."""
    match = SINGLE_RE.search(line)
    if not match:
        return None
    before = line[: match.start()].rstrip().rstrip("[(").strip()
    before = before.strip(BULLETS + LABEL_PUNCTUATION).strip()
    after = _clean_label(line[match.end():].lstrip("])"))
    label = " ".join(part for part in (before, after) if part)
    return _group_seconds(match, "a"), label


def parse_timestamp(ts: str) -> float:
    """
    Convert a timestamp string to seconds.

    Accepts M:SS, H:MM:SS, and decimal seconds (1:30.5). Anything else is 0.0.
    """
    if not isinstance(ts, str):
        return 0.0
    parts = [p.strip() for p in ts.replace(",", ".").split(":")]
    try:
        if len(parts) == 2:
            minutes, seconds = parts
            return int(minutes) * 60 + float(seconds)
        elif len(parts) == 3:
            hours, minutes, seconds = parts
            return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    except ValueError:
        return 0.0
    return 0.0


def format_timestamp(seconds: float) -> str:
    """Convert seconds to M:SS.d, or H:MM:SS.d past the hour."""
    seconds = max(0.0, seconds)
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:04.1f}"
    return f"{minutes}:{secs:04.1f}"

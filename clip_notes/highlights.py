"""AI highlight detection with Gemini, rendered as clip notes."""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .config import Settings
from .timestamps import format_timestamp

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"
REQUEST_TIMEOUT = 120.0


@dataclass
class Highlight:
    """One AI-suggested moment in the source video."""

    start: float  # seconds
    end: float  # seconds
    reason: str
    score: float


@dataclass
class AnalysisResult:
    summary: str
    highlights: list[Highlight]


def extract_json(response_text: str) -> str:
    """Strip markdown code fences the model sometimes wraps JSON in."""
    text = response_text.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return text.strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_analysis(response_text: str, duration: float) -> AnalysisResult:
    """
    Parse the model's JSON answer.

    Highlights with missing fields, negative starts, ends past `duration`, or
    end <= start are discarded. The rest are sorted by start time.

    Raises:
        ValueError: If the response is not a JSON object
    """
    try:
        data = json.loads(extract_json(response_text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse AI response: {e}")
    if not isinstance(data, dict):
        raise ValueError("AI response is not a JSON object")

    highlights = []
    for item in data.get("highlights") or []:
        if not isinstance(item, dict):
            continue
        start, end = item.get("start"), item.get("end")
        reason, score = item.get("reason"), item.get("score")
        if not (_is_number(start) and _is_number(end) and _is_number(score)):
            continue
        if not isinstance(reason, str):
            continue
        if start < 0 or end > duration or start >= end:
            logger.debug("Discarding out-of-range highlight %s-%s", start, end)
            continue
        highlights.append(Highlight(float(start), float(end), reason.strip(), float(score)))

    highlights.sort(key=lambda h: h.start)
    return AnalysisResult(
        summary=data.get("summary") or "Video analysis completed.",
        highlights=highlights,
    )


def highlights_to_notes(highlights: list[Highlight]) -> str:
    """Render highlights as range notes (`M:SS.d - M:SS.d reason`)."""
    lines = []
    for h in highlights:
        # '#' and '//' would be read back as comments
        reason = h.reason.replace("#", "").replace("//", "/").replace("\n", " ").strip()
        lines.append(f"{format_timestamp(h.start)} - {format_timestamp(h.end)} {reason}")
    return "\n".join(lines)


def analyze_video(
    video_url: str,
    duration: float,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """
    Ask Gemini for the highlight moments of a video.

    Args:
        video_url: Public URL of the video
        duration: Video length in seconds, used to validate the answer
        settings: Model selection (defaults from the environment)

    Returns:
        AnalysisResult with validated, time-sorted highlights
    """
    from google import genai
    from google.genai import types

    settings = settings or Settings.from_env()

    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise ValueError("GEMINI_API_KEY not set in environment")

    http_options = types.HttpOptions(client_args={"timeout": REQUEST_TIMEOUT})
    client = genai.Client(api_key=api_key, http_options=http_options)

    prompt = (PROMPTS_DIR / "highlight_analysis.txt").read_text(encoding="utf-8")
    prompt += (
        f"\n\nVideo URL: {video_url}\n"
        f"Video Duration: {duration} seconds\n\n"
        "Identify 5-10 key highlights spread across the video."
    )

    start_time = time.time()
    response = client.models.generate_content(
        model=settings.gemini_model,
        contents=prompt,
    )
    logger.debug("Gemini answered in %.1fs", time.time() - start_time)

    result = parse_analysis(response.text or "", duration)
    logger.info("Gemini returned %d usable highlights", len(result.highlights))
    return result

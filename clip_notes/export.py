"""Clip interchange (JSON triples) and copy-paste export scripts."""

import json
import logging
import shlex
from typing import Any, Iterable, Sequence

from .models import Clip

logger = logging.getLogger(__name__)

YOUTUBE_HOSTS = ("youtube.com", "youtu.be")


def clips_to_records(clips: Iterable[Clip]) -> list[dict[str, Any]]:
    """Ordered {startTime, endTime, text} triples, as shared with other views."""
    return [
        {"startTime": clip.start_time, "endTime": clip.end_time, "text": clip.text}
        for clip in clips
    ]


def clips_from_records(records: Iterable[dict[str, Any]]) -> list[Clip]:
    """
    Rebuild clips from stored triples.

    Entries that are not mappings, lack numeric times, or have a non-positive
    length are skipped. Ids are reassigned densely in list order.
    """
    clips: list[Clip] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        try:
            start = float(record["startTime"])
            end = float(record["endTime"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping malformed clip record: %r", record)
            continue
        if start < 0 or end <= start:
            logger.debug("Skipping degenerate clip record: %r", record)
            continue

        n = len(clips)
        text = str(record.get("text") or "") or f"Clip {n + 1}"
        clips.append(Clip(id=f"clip-{n}", start_time=start, end_time=end, text=text))
    return clips


def dumps_clips(clips: Iterable[Clip], indent: int = 2) -> str:
    return json.dumps(clips_to_records(clips), indent=indent, ensure_ascii=False)


def loads_clips(payload: str) -> list[Clip]:
    """Parse a JSON array of clip triples. Raises ValueError on invalid JSON."""
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of clips")
    return clips_from_records(data)


def format_section_time(seconds: float) -> str:
    """Whole-second H:MM:SS or M:SS, as yt-dlp --download-sections expects."""
    seconds = int(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_filename_segment(seconds: float) -> str:
    """Filename-safe HH_MM_SS / MM_SS matching yt-dlp's section_start output."""
    seconds = int(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    segment = f"{hours:02d}_" if hours > 0 else ""
    return segment + f"{minutes:02d}_{secs:02d}"


def is_youtube_url(url: str) -> bool:
    return any(host in url for host in YOUTUBE_HOSTS)


def _section_filename(clip: Clip) -> str:
    start = format_filename_segment(clip.start_time)
    end = format_filename_segment(clip.end_time)
    return f"clip_{start}_to_{end}.mp4"


def _youtube_script(input_url: str, clips: Sequence[Clip], output_path: str) -> str:
    sections = " ".join(
        f'--download-sections "*{format_section_time(c.start_time)}-{format_section_time(c.end_time)}"'
        for c in clips
    )
    download_cmd = (
        f"yt-dlp {sections} --force-keyframes-at-cuts -f \"bv+ba/b/best\" "
        f"-o 'clip_%(section_start)s_to_%(section_end)s.mp4' {shlex.quote(input_url)}"
    )
    file_list = " ".join(f"\"file '{_section_filename(c)}'\"" for c in clips)

    lines = [
        "# ClipNote export script",
        "#",
        "# Downloads each clip section with yt-dlp, merges them with ffmpeg,",
        "# then removes the intermediate files.",
        "# Requires: yt-dlp, ffmpeg",
        "",
        "# Step 1: download all clip sections",
        download_cmd,
        "",
        "# Step 2: list the sections in playback order",
        f"printf \"%s\\n\" {file_list} > filelist.txt",
        "",
        "# Step 3: merge",
        f"ffmpeg -f concat -safe 0 -i filelist.txt -c copy {shlex.quote(output_path)}",
        "",
        "# Step 4: clean up (optional)",
        "rm clip_*.mp4 filelist.txt",
        "",
    ]
    return "\n".join(lines)


def _ffmpeg_command(input_url: str, clips: Sequence[Clip], output_path: str) -> str:
    filter_parts = []
    concat_inputs = []
    for i, clip in enumerate(clips):
        filter_parts.append(
            f"[0:v]trim=start={clip.start_time}:end={clip.end_time},setpts=PTS-STARTPTS[v{i}];"
            f"[0:a]atrim=start={clip.start_time}:end={clip.end_time},asetpts=PTS-STARTPTS[a{i}]"
        )
        concat_inputs.append(f"[v{i}][a{i}]")

    filter_complex = ";".join(filter_parts)
    concat = f"{''.join(concat_inputs)}concat=n={len(clips)}:v=1:a=1[outv][outa]"

    cmd = [
        "ffmpeg",
        "-i", shlex.quote(input_url),
        "-filter_complex", f'"{filter_complex};{concat}"',
        "-map", '"[outv]"',
        "-map", '"[outa]"',
        shlex.quote(output_path),
    ]
    return " ".join(cmd)


def build_export_script(
    input_url: str,
    clips: Sequence[Clip],
    output_path: str = "output.mp4",
) -> str:
    """
    Build a shell script that cuts and joins the clips into one file.

    Nothing is executed here. YouTube sources get a yt-dlp download + concat
    script; local files and direct URLs get a single ffmpeg trim/concat command.

    Args:
        input_url: Source video URL or local path
        clips: Clips in playback order
        output_path: Name of the merged file the script writes

    Returns:
        Script text, or "" when there are no clips
    """
    if not clips:
        return ""
    if is_youtube_url(input_url):
        return _youtube_script(input_url, clips, output_path)
    return _ffmpeg_command(input_url, clips, output_path)

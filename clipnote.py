#!/usr/bin/env python3
"""
ClipNote - Turn timestamped notes about a video into clips.

Interactive CLI tool - just run: python clipnote.py
Reads notes from a file, pasted text, or AI highlight detection, then previews
the clips back-to-back on a simulated player or prints an export script.
"""

import sys
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from clip_notes.config import Settings
from clip_notes.export import build_export_script, dumps_clips
from clip_notes.log import setup_logging
from clip_notes.models import Clip, PlaybackState
from clip_notes.parser import parse_notes
from clip_notes.playback import PlaybackController
from clip_notes.surface import SimulatedSurface
from clip_notes.timeline import VirtualTimeline, build_timeline
from clip_notes.timestamps import format_timestamp, parse_timestamp
from clip_notes.utils import Spinner, TimelineBar

load_dotenv()


def prompt_choice(question: str, options: list[str], default: int = 0) -> int:
    """
    Prompt user to select from a list of options.

    Returns the index of the selected option.
    """
    print(f"\n{question}")
    for i, option in enumerate(options):
        marker = "→" if i == default else " "
        print(f"  {marker} {i + 1}. {option}")

    while True:
        try:
            choice = input(f"\nEnter choice [1-{len(options)}] (default: {default + 1}): ").strip()
            if not choice:
                return default
            idx = int(choice) - 1
            if 0 <= idx < len(options):
                return idx
            print(f"Please enter a number between 1 and {len(options)}")
        except ValueError:
            print("Please enter a valid number")


def prompt_duration(question: str, required: bool = False) -> Optional[float]:
    """Ask for a length as M:SS, H:MM:SS or plain seconds. Blank means unknown."""
    while True:
        answer = input(f"\n{question}: ").strip()
        if not answer:
            if required:
                print("Please enter a duration")
                continue
            return None
        seconds = parse_timestamp(answer) if ":" in answer else _to_float(answer)
        if seconds and seconds > 0:
            return seconds
        print("❌ Invalid duration. Try 12:30 or 750")


def _to_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


def read_pasted_notes() -> str:
    """Read notes from stdin until an empty line."""
    print("Paste your notes. Finish with an empty line.\n")
    lines = []
    while True:
        line = input()
        if not line.strip():
            break
        lines.append(line)
    return "\n".join(lines)


def read_notes_file() -> str:
    while True:
        file_input = input("Enter path to notes file: ").strip().strip("\"'")
        if not file_input:
            print("Please enter a file path")
            continue
        notes_path = Path(file_input).expanduser().resolve()
        if not notes_path.is_file():
            print(f"❌ File not found: {notes_path}")
            continue
        return notes_path.read_text(encoding="utf-8")


def notes_from_ai(settings: Settings) -> tuple[str, float, str]:
    """Generate notes from Gemini highlight detection."""
    from clip_notes.highlights import REQUEST_TIMEOUT, analyze_video, highlights_to_notes

    url = ""
    while not url:
        url = input("\nPaste video URL: ").strip()
    duration = prompt_duration("Video length (M:SS or seconds)", required=True)

    spinner = Spinner("Finding highlights with AI...")
    spinner.start()

    start_time = time.time()
    try:
        result = analyze_video(url, duration, settings)
        elapsed = time.time() - start_time
        spinner.stop(f"✅ Analysis complete ({elapsed:.1f}s)")
    except Exception as e:
        elapsed = time.time() - start_time
        spinner.stop()
        print(f"\n❌ GEMINI API ERROR (highlight analysis)")
        print(f"   Elapsed time: {elapsed:.1f}s before failure")
        print(f"   Error type: {type(e).__name__}")
        print(f"   Error message: {e}")
        if elapsed >= REQUEST_TIMEOUT - 5:
            print(f"   ⚠️  Likely a timeout - consider a shorter video")
        raise

    print(f"\n📝 {result.summary}")
    return highlights_to_notes(result.highlights), duration, url


def show_clips(clips: list[Clip], timeline: VirtualTimeline):
    print("\n" + "─" * 60)
    print("📋 CLIPS")
    print("─" * 60)

    for i, (clip, r) in enumerate(zip(clips, timeline.ranges), 1):
        span = f"{format_timestamp(clip.start_time):>9} → {format_timestamp(clip.end_time):<9}"
        at = f"@{format_timestamp(r.virtual_start)}"
        label = clip.text[:30] + "..." if len(clip.text) > 30 else clip.text
        print(f"  {i:2}. {span} {clip.duration:6.1f}s {at:>10} │ {label}")

    print("─" * 60)
    print(f"  {len(clips)} clip(s), {format_timestamp(timeline.total_virtual_duration)} total")


def preview_playback(clips: list[Clip], video_duration: Optional[float], settings: Settings):
    """Play the clips back-to-back on a simulated player, drawing the virtual timeline."""
    speed_choice = prompt_choice("Preview speed:", ["1x (real time)", "4x", "10x"], default=1)
    speed = (1.0, 4.0, 10.0)[speed_choice]

    duration = max([clip.end_time for clip in clips] + [video_duration or 0.0])
    surface = SimulatedSurface(duration, ready=False)
    controller = PlaybackController(surface, clips, settings).bind()
    bar = TimelineBar(controller.timeline, [clip.text for clip in clips])

    surface.mark_ready()
    controller.play()
    print("\n▶️  Playing clips (Ctrl+C to stop)\n")

    try:
        while controller.state is PlaybackState.PLAYING:
            surface.tick(settings.tick_seconds * speed)
            bar.update(controller.current_virtual_time, controller.current_clip_index)
            if not surface.playing:
                break  # media ended before the last clip did
            time.sleep(settings.tick_seconds)
    except KeyboardInterrupt:
        controller.pause()
        bar.update(controller.current_virtual_time, controller.current_clip_index, playing=False)
    finally:
        bar.finish()
        controller.unbind()

    if controller.state is PlaybackState.FINISHED:
        print("✅ Reached the end of the last clip")
    else:
        print("⏸  Stopped")


def main():
    print("\n" + "═" * 60)
    print("🎬 CLIPNOTE")
    print("   Play your timestamped notes as one video")
    print("═" * 60)

    try:
        settings = Settings.from_env(dotenv=False)
    except ValueError as e:
        print(f"\n❌ Configuration error: {e}")
        sys.exit(1)
    setup_logging(settings.log_level)

    try:
        # Step 1: Notes
        print("\n📝 STEP 1: Notes")
        print("─" * 60)

        source_choice = prompt_choice(
            "Where are your notes?",
            [
                "Notes file - one timestamp per line",
                "Paste notes into the terminal",
                "AI - Detect highlights from a video URL",
            ],
            default=0,
        )

        video_duration = None
        video_url = ""
        if source_choice == 0:
            notes = read_notes_file()
        elif source_choice == 1:
            notes = read_pasted_notes()
        else:
            notes, video_duration, video_url = notes_from_ai(settings)

        if video_duration is None:
            video_duration = prompt_duration("Video length, for the last note (blank if unknown)")

        # Step 2: Parse
        print("\n🔍 STEP 2: Clips")
        clips = parse_notes(notes, video_duration)
        if not clips:
            print("\n❌ No timestamps found. Lines look like '0:30 - 1:45 Intro' or '2:00 Highlight'.")
            sys.exit(1)

        timeline = build_timeline(clips)
        show_clips(clips, timeline)

        # Step 3: Actions
        while True:
            action = prompt_choice(
                "What next?",
                [
                    "Preview - play clips back-to-back",
                    "Export script - yt-dlp / ffmpeg commands",
                    "Print clips as JSON",
                    "Quit",
                ],
                default=0,
            )

            if action == 0:
                preview_playback(clips, video_duration, settings)
            elif action == 1:
                if not video_url:
                    video_url = input("\nVideo URL or file path: ").strip() or "input.mp4"
                output = input("Output file (default: output.mp4): ").strip() or "output.mp4"
                print("\n" + build_export_script(video_url, clips, output))
            elif action == 2:
                print("\n" + dumps_clips(clips))
            else:
                print("Goodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nCancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

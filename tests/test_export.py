import json

import pytest

from clip_notes.export import (
    build_export_script,
    clips_from_records,
    clips_to_records,
    dumps_clips,
    format_filename_segment,
    format_section_time,
    is_youtube_url,
    loads_clips,
)
from clip_notes.parser import parse_notes
from tests.conftest import make_clips


class TestRecords:
    def test_to_records(self):
        records = clips_to_records(make_clips((1, 2)))
        assert records == [{"startTime": 1, "endTime": 2, "text": "Clip 1"}]

    def test_dumps_is_a_json_array(self):
        data = json.loads(dumps_clips(parse_notes("0:10 - 0:20 Café")))
        assert data == [{"startTime": 10.0, "endTime": 20.0, "text": "Café"}]

    def test_loads(self):
        clips = loads_clips('[{"startTime": 5, "endTime": 9.5, "text": "A"}]')
        assert [(c.id, c.start_time, c.end_time, c.text) for c in clips] == [
            ("clip-0", 5.0, 9.5, "A")
        ]

    def test_bad_entries_are_skipped(self):
        clips = clips_from_records([
            {"startTime": 1, "endTime": 2, "text": "keep"},
            "not a record",
            {"startTime": "x", "endTime": 2},
            {"endTime": 4},
            {"startTime": 9, "endTime": 3},
            {"startTime": 10, "endTime": 12},
        ])
        assert [c.id for c in clips] == ["clip-0", "clip-1"]
        assert [c.text for c in clips] == ["keep", "Clip 2"]

    def test_loads_rejects_non_array(self):
        with pytest.raises(ValueError):
            loads_clips('{"startTime": 1}')

    def test_loads_rejects_invalid_json(self):
        with pytest.raises(ValueError):
            loads_clips("[{")


class TestTimeFormats:
    @pytest.mark.parametrize("seconds, expected", [
        (0, "0:00"), (65.9, "1:05"), (3600, "1:00:00"), (3725, "1:02:05"),
    ])
    def test_section_time(self, seconds, expected):
        assert format_section_time(seconds) == expected

    @pytest.mark.parametrize("seconds, expected", [
        (65, "01_05"), (3725, "01_02_05"),
    ])
    def test_filename_segment(self, seconds, expected):
        assert format_filename_segment(seconds) == expected

    def test_youtube_detection(self):
        assert is_youtube_url("https://www.youtube.com/watch?v=abc")
        assert is_youtube_url("https://youtu.be/abc")
        assert not is_youtube_url("/videos/talk.mp4")


class TestExportScript:
    def test_no_clips(self):
        assert build_export_script("talk.mp4", []) == ""

    def test_youtube_script(self):
        clips = make_clips((30, 105), (120, 210))
        script = build_export_script("https://youtu.be/abc", clips, "best.mp4")

        assert '--download-sections "*0:30-1:45"' in script
        assert '--download-sections "*2:00-3:30"' in script
        assert "clip_00_30_to_01_45.mp4" in script
        assert script.index("clip_00_30_to_01_45.mp4") < script.index("clip_02_00_to_03_30.mp4")
        assert "ffmpeg -f concat -safe 0 -i filelist.txt -c copy best.mp4" in script
        assert "rm clip_*.mp4 filelist.txt" in script

    def test_local_file_command(self):
        clips = make_clips((1.5, 4), (10, 12))
        command = build_export_script("talk.mp4", clips)

        assert command.startswith("ffmpeg -i talk.mp4 ")
        assert "[0:v]trim=start=1.5:end=4,setpts=PTS-STARTPTS[v0]" in command
        assert "[0:a]atrim=start=10:end=12,asetpts=PTS-STARTPTS[a1]" in command
        assert "[v0][a0][v1][a1]concat=n=2:v=1:a=1[outv][outa]" in command
        assert command.endswith(" output.mp4")
        assert "\n" not in command

    def test_shell_characters_are_quoted(self):
        clips = make_clips((1, 2))
        command = build_export_script('my "talk" $HOME.mp4', clips, "it's.mp4")
        assert command.startswith("ffmpeg -i 'my \"talk\" $HOME.mp4' ")
        assert command.endswith(" 'it'\"'\"'s.mp4'")

    def test_youtube_url_with_shell_characters(self):
        url = "https://www.youtube.com/watch?v=abc&t=$1"
        script = build_export_script(url, make_clips((1, 2)), "out $x.mp4")
        assert f"'{url}'" in script
        assert "-c copy 'out $x.mp4'" in script

import json
from unittest.mock import MagicMock

import pytest

from clip_notes.config import Settings
from clip_notes.highlights import (
    Highlight,
    analyze_video,
    extract_json,
    highlights_to_notes,
    parse_analysis,
)
from clip_notes.parser import parse_notes

RESPONSE = {
    "summary": "A talk about parsers.",
    "highlights": [
        {"start": 120, "end": 150.5, "reason": "Live demo", "score": 0.9},
        {"start": 10, "end": 40, "reason": "Opening joke", "score": 0.7},
        {"start": 50, "end": 45, "reason": "Backwards", "score": 0.5},
        {"start": 580, "end": 700, "reason": "Past the end", "score": 0.8},
        {"start": True, "end": 20, "reason": "Bool start", "score": 0.1},
        {"start": 60, "end": 70, "score": 0.2},
    ],
}


class TestExtractJson:
    def test_plain(self):
        assert extract_json(' {"a": 1} ') == '{"a": 1}'

    def test_json_fence(self):
        assert extract_json('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert extract_json('Here:\n```\n[1]\n```\nDone') == "[1]"


class TestParseAnalysis:
    def test_filters_and_sorts(self):
        result = parse_analysis(json.dumps(RESPONSE), duration=600)
        assert result.summary == "A talk about parsers."
        assert [(h.start, h.end, h.reason) for h in result.highlights] == [
            (10.0, 40.0, "Opening joke"),
            (120.0, 150.5, "Live demo"),
        ]

    def test_missing_summary(self):
        result = parse_analysis('{"highlights": []}', duration=60)
        assert result.summary == "Video analysis completed."
        assert result.highlights == []

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Failed to parse"):
            parse_analysis("not json at all", duration=60)

    def test_non_object(self):
        with pytest.raises(ValueError):
            parse_analysis("[1, 2]", duration=60)


class TestHighlightsToNotes:
    def test_reparses_as_range_notes(self):
        highlights = [
            Highlight(12.3, 45.0, "Intro", 0.5),
            Highlight(3700, 3725, "Late bit", 0.9),
        ]
        clips = parse_notes(highlights_to_notes(highlights))
        assert [(c.start_time, c.end_time, c.text) for c in clips] == [
            (pytest.approx(12.3), 45.0, "Intro"),
            (3700.0, 3725.0, "Late bit"),
        ]

    def test_comment_markers_are_removed(self):
        notes = highlights_to_notes([Highlight(1, 2, "Goal #1 // replay", 0.5)])
        assert parse_notes(notes)[0].text == "Goal 1 / replay"


class TestAnalyzeVideo:
    @pytest.fixture
    def settings(self):
        return Settings(gemini_model="test-model")

    def test_requires_api_key(self, monkeypatch, settings):
        pytest.importorskip("google.genai")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            analyze_video("https://youtu.be/abc", 600, settings)

    def test_returns_validated_highlights(self, monkeypatch, capsys, settings):
        pytest.importorskip("google.genai")
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        client = MagicMock()
        client.models.generate_content.return_value.text = (
            "```json\n" + json.dumps(RESPONSE) + "\n```"
        )
        monkeypatch.setattr("google.genai.Client", MagicMock(return_value=client))

        result = analyze_video("https://youtu.be/abc", 600, settings)

        assert len(result.highlights) == 2
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert "https://youtu.be/abc" in kwargs["contents"]
        assert capsys.readouterr().out == ""

    def test_api_errors_propagate_without_console_output(self, monkeypatch, capsys, settings):
        pytest.importorskip("google.genai")
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("quota exceeded")
        monkeypatch.setattr("google.genai.Client", MagicMock(return_value=client))

        with pytest.raises(RuntimeError, match="quota"):
            analyze_video("https://youtu.be/abc", 600, settings)
        assert capsys.readouterr().out == ""

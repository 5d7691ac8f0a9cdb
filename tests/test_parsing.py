"""Tests for the marker parser."""

import pytest

from vsg.parsing import MarkerParser, Section, split_blocks


class TestMarkerParser:

    def test_multiline_sections_stop_at_next_marker(self):
        parser = MarkerParser([
            Section("image", "IMAGE PROMPT:"),
            Section("video", "VIDEO PROMPT:"),
        ])
        result = parser.parse(
            "IMAGE PROMPT:\nA misty harbour at dawn,\nsoft light\n\nVIDEO PROMPT:\nSlow dolly in"
        )
        assert result["image"] == "A misty harbour at dawn,\nsoft light"
        assert result["video"] == "Slow dolly in"
        assert result.complete

    def test_missing_section_uses_default_and_is_reported(self):
        parser = MarkerParser([
            Section("gender", "GENDER:", default="neutral", multiline=False),
            Section("style", "STYLE:", default="narrator", multiline=False),
        ])
        result = parser.parse("GENDER: female\n")
        assert result["gender"] == "female"
        assert result["style"] == "narrator"
        assert result.defaulted == ["style"]

    def test_blank_section_counts_as_missing(self):
        parser = MarkerParser([Section("synopsis", "SYNOPSIS:")])
        result = parser.parse("SYNOPSIS:\n\n")
        assert result["synopsis"] == ""
        assert result.defaulted == ["synopsis"]

    def test_marker_must_start_a_line(self):
        parser = MarkerParser([Section("script", "SCRIPT:")])
        assert parser.parse("MODIFIED SCRIPT: hello")["script"] == ""
        assert parser.parse("   SCRIPT: hello")["script"] == "hello"

    def test_single_line_section_ends_at_newline(self):
        parser = MarkerParser([Section("emotion", "EMOTION:", multiline=False)])
        assert parser.parse("EMOTION: calm\nsomething else")["emotion"] == "calm"

    def test_stop_markers_end_a_section(self):
        parser = MarkerParser([Section("synopsis", "SYNOPSIS:")], stops=("SCENES:",))
        result = parser.parse("SYNOPSIS:\nA story.\n\nSCENES:\n---SCENE 1---")
        assert result["synopsis"] == "A story."

    def test_garbage_never_raises(self):
        parser = MarkerParser([Section("a", "A:"), Section("b", "B:")])
        for text in ("", None, "no markers here", ":::\n\n"):
            result = parser.parse(text)
            assert result.values == {"a": "", "b": ""}

    def test_windows_line_endings(self):
        parser = MarkerParser([Section("a", "A:"), Section("b", "B:")])
        result = parser.parse("A: one\r\nB: two\r\n")
        assert result["a"] == "one"
        assert result["b"] == "two"

    def test_rejects_empty_or_duplicate_grammar(self):
        with pytest.raises(ValueError):
            MarkerParser([])
        with pytest.raises(ValueError):
            MarkerParser([Section("a", "A:"), Section("a", "B:")])


class TestSplitBlocks:

    def test_splits_numbered_blocks(self):
        text = (
            "SCENES:\n\n"
            "---SCENE 1---\nSCRIPT: one\n---END SCENE---\n\n"
            "---SCENE 2---\nSCRIPT: two\n---END SCENE---\n"
        )
        assert split_blocks(text) == ["SCRIPT: one", "SCRIPT: two"]

    def test_block_without_end_marker_runs_to_next_header(self):
        text = "---SCENE 1---\nSCRIPT: one\n---SCENE 2---\nSCRIPT: two"
        assert split_blocks(text) == ["SCRIPT: one", "SCRIPT: two"]

    def test_no_blocks(self):
        assert split_blocks("Sorry, I cannot help with that.") == []

"""Tests for snippet wrapping and segmentation."""

from __future__ import annotations

import unittest

from chat_composer.constants import SNIPPET_MARKERS, SnippetMarkers
from chat_composer.snippets import (
    Prose,
    Snippet,
    has_marker,
    split_snippets,
    wrap_file,
    wrap_snippet,
)

BEGIN = SNIPPET_MARKERS.begin
END = SNIPPET_MARKERS.end


class WrapTests(unittest.TestCase):
    """Validate the exact text the composer inserts."""

    def test_wrap_snippet_format(self) -> None:
        self.assertEqual(wrap_snippet("body"), f"{BEGIN}\nbody\n{END}\n")

    def test_wrap_file_adds_caption(self) -> None:
        self.assertEqual(
            wrap_file("notes.txt", "hello"),
            f"File: notes.txt:\n{BEGIN}\nhello\n{END}\n",
        )

    def test_has_marker_detects_either_marker(self) -> None:
        self.assertTrue(has_marker(f"x {BEGIN} y"))
        self.assertTrue(has_marker(f"x {END} y"))
        self.assertFalse(has_marker("plain text"))


class SplitSnippetsTests(unittest.TestCase):
    """Validate segmentation of stored buffers."""

    def test_plain_text_is_single_prose(self) -> None:
        self.assertEqual(split_snippets("hello world"), [Prose("hello world")])

    def test_empty_text_yields_no_segments(self) -> None:
        self.assertEqual(split_snippets(""), [])

    def test_round_trip_of_wrapped_paste(self) -> None:
        for body in ["x", "line one\nline two", "", "trailing\n", "\n\nlead"]:
            with self.subTest(body=body):
                self.assertEqual(split_snippets(wrap_snippet(body)), [Snippet(body)])

    def test_twenty_five_line_paste_round_trips(self) -> None:
        pasted = "\n".join(f"row {index}" for index in range(26))
        self.assertEqual(pasted.count("\n"), 25)
        self.assertEqual(split_snippets(wrap_snippet(pasted)), [Snippet(pasted)])

    def test_prose_around_snippet(self) -> None:
        text = f"before\n{wrap_snippet('code')}after"
        self.assertEqual(
            split_snippets(text),
            [Prose("before\n"), Snippet("code"), Prose("after")],
        )

    def test_multiple_snippets_keep_order(self) -> None:
        text = f"a{wrap_snippet('one')}b{wrap_snippet('two')}"
        self.assertEqual(
            split_snippets(text),
            [Prose("a"), Snippet("one"), Prose("b"), Snippet("two")],
        )

    def test_file_caption_stays_prose(self) -> None:
        segments = split_snippets(wrap_file("main.py", "print(1)"))
        self.assertEqual(segments, [Prose("File: main.py:\n"), Snippet("print(1)")])

    def test_unterminated_begin_degrades_to_prose(self) -> None:
        text = f"intro {BEGIN}\nno end here"
        self.assertEqual(
            split_snippets(text), [Prose("intro "), Prose("\nno end here")]
        )

    def test_stray_end_marker_in_first_piece(self) -> None:
        text = f"abc{END}def"
        self.assertEqual(split_snippets(text), [Snippet("abc"), Prose("def")])

    def test_snippets_do_not_nest(self) -> None:
        text = f"{BEGIN}\nouter {BEGIN}\ninner\n{END}\n{END}\n"
        segments = split_snippets(text)
        self.assertFalse(
            any(
                isinstance(segment, Snippet) and BEGIN in segment.text
                for segment in segments
            )
        )
        self.assertIn(Snippet("inner"), segments)

    def test_custom_markers(self) -> None:
        markers = SnippetMarkers(begin="<<<", end=">>>")
        text = wrap_snippet("body", markers)
        self.assertEqual(text, "<<<\nbody\n>>>\n")
        self.assertEqual(split_snippets(text, markers), [Snippet("body")])

    def test_no_characters_lost_outside_markers(self) -> None:
        text = f"x{wrap_snippet('mid')}  y  "
        segments = split_snippets(text)
        self.assertEqual(segments[0], Prose("x"))
        self.assertEqual(segments[-1], Prose("  y  "))


if __name__ == "__main__":
    unittest.main()

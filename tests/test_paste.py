"""Tests for paste classification and clipboard image ingestion."""

from __future__ import annotations

import unittest

from chat_composer.composer import Composer
from chat_composer.config import ComposerSettings
from chat_composer.constants import PASTED_IMAGE_FILENAME, SNIPPET_MARKERS
from chat_composer.exceptions import AttachmentDecodeError
from chat_composer.managers.attachment import Provenance
from chat_composer.managers.paste import PasteDecision, PasteEvent
from chat_composer.media import FileDescriptor, FileSource
from chat_composer.snippets import Snippet, split_snippets, wrap_snippet
from chat_composer.state import Selection
from fakes import FakeView, ManualScheduler


async def _fake_normalize(source: FileSource) -> tuple[str, FileDescriptor]:
    return f"data:{source.mime_type};base64,AAAA", FileDescriptor(
        f"normalized-{source.name}", source.mime_type
    )


async def _failing_normalize(source: FileSource) -> tuple[str, FileDescriptor]:
    raise AttachmentDecodeError(f"cannot decode {source.name}")


def _clipboard_image(index: int) -> FileSource:
    return FileSource(name=f"clip-{index}.png", mime_type="image/png", data=b"\x89PNG")


def _make_composer(
    settings: ComposerSettings | None = None, normalize=_fake_normalize
) -> tuple[Composer, FakeView]:
    view = FakeView()
    composer = Composer(
        lambda text, attachments: None,
        lambda: None,
        settings=settings or ComposerSettings(),
        view=view,
        scheduler=ManualScheduler(),
        normalize_image=normalize,
    )
    return composer, view


class TextPasteTests(unittest.TestCase):
    """Oversized text is folded into a snippet; everything else passes through."""

    def test_many_line_paste_is_wrapped(self) -> None:
        composer, _ = _make_composer(ComposerSettings(maximum_rows=20))
        pasted = "\n".join(f"line {index}" for index in range(26))
        self.assertEqual(pasted.count("\n"), 25)

        decision = composer.paste(PasteEvent(text=pasted))

        self.assertIs(decision, PasteDecision.SUPPRESS)
        self.assertEqual(composer.text, wrap_snippet(pasted))
        self.assertEqual(split_snippets(composer.text), [Snippet(pasted)])

    def test_newline_threshold_is_inclusive(self) -> None:
        composer, _ = _make_composer(ComposerSettings(maximum_rows=20))
        self.assertTrue(composer.paste_classifier.is_oversized("\n" * 20))
        self.assertFalse(composer.paste_classifier.is_oversized("\n" * 19))

    def test_long_single_line_is_wrapped(self) -> None:
        composer, _ = _make_composer()
        limit = composer.settings.oversized_length
        self.assertEqual(limit, 80 * 20)
        self.assertFalse(composer.paste_classifier.is_oversized("x" * limit))
        decision = composer.paste(PasteEvent(text="x" * (limit + 1)))
        self.assertIs(decision, PasteDecision.SUPPRESS)
        self.assertTrue(composer.text.startswith(SNIPPET_MARKERS.begin))

    def test_short_paste_uses_default_behaviour(self) -> None:
        composer, _ = _make_composer()
        composer.set_text("draft")
        decision = composer.paste(PasteEvent(text="a few words"))
        self.assertIs(decision, PasteDecision.DEFAULT)
        self.assertEqual(composer.text, "draft")

    def test_paste_containing_marker_is_not_rewrapped(self) -> None:
        composer, _ = _make_composer()
        already_wrapped = wrap_snippet("\n".join(["row"] * 40))
        decision = composer.paste(PasteEvent(text=already_wrapped))
        self.assertIs(decision, PasteDecision.DEFAULT)
        self.assertEqual(composer.text, "")

    def test_unreadable_clipboard_uses_default_behaviour(self) -> None:
        composer, _ = _make_composer()
        self.assertIs(composer.paste(PasteEvent(text=None)), PasteDecision.DEFAULT)
        self.assertIs(composer.paste(PasteEvent(text="")), PasteDecision.DEFAULT)

    def test_wrapped_paste_replaces_live_selection(self) -> None:
        composer, view = _make_composer()
        composer.set_text("a--b")
        view.selection = Selection(1, 3)
        pasted = "\n" * 25

        composer.paste(PasteEvent(text=pasted))

        wrapped = wrap_snippet(pasted)
        self.assertEqual(composer.text, f"a{wrapped}b")
        self.assertEqual(composer.selection, Selection.caret(1 + len(wrapped)))

    def test_custom_row_limit(self) -> None:
        composer, _ = _make_composer(ComposerSettings(maximum_rows=3))
        decision = composer.paste(PasteEvent(text="one\ntwo\nthree\nfour"))
        self.assertIs(decision, PasteDecision.SUPPRESS)


class ImagePasteTests(unittest.IsolatedAsyncioTestCase):
    """Clipboard images become attachments, subject to policy and cap."""

    async def test_pasted_images_are_ingested(self) -> None:
        composer, _ = _make_composer()
        decision = composer.paste(
            PasteEvent(text=None, items=[_clipboard_image(0), _clipboard_image(1)])
        )
        self.assertIs(decision, PasteDecision.SUPPRESS)
        await composer.tasks.await_all()

        attachments = composer.pending_attachments
        self.assertEqual(len(attachments), 2)
        for attachment in attachments:
            self.assertEqual(attachment.provenance, Provenance.PASTED)
            self.assertEqual(attachment.filename, PASTED_IMAGE_FILENAME)
            self.assertEqual(attachment.mime_type, "image/png")

    async def test_image_cap_is_enforced(self) -> None:
        composer, _ = _make_composer(
            ComposerSettings(maximum_image_attachments_per_message=2)
        )
        items = [_clipboard_image(index) for index in range(5)]
        composer.paste(PasteEvent(text=None, items=items))
        await composer.tasks.await_all()
        self.assertEqual(len(composer.pending_attachments), 2)

        composer.paste(PasteEvent(text=None, items=[_clipboard_image(9)]))
        await composer.tasks.await_all()
        self.assertEqual(len(composer.pending_attachments), 2)

    async def test_images_ignored_when_disallowed(self) -> None:
        composer, _ = _make_composer(ComposerSettings(allow_image_attachment="no"))
        decision = composer.paste(PasteEvent(text=None, items=[_clipboard_image(0)]))
        self.assertIs(decision, PasteDecision.DEFAULT)
        self.assertEqual(len(composer.tasks), 0)
        await composer.tasks.await_all()
        self.assertEqual(composer.pending_attachments, [])

    async def test_non_image_items_are_ignored(self) -> None:
        composer, _ = _make_composer()
        item = FileSource(name="notes.txt", mime_type="text/plain", data=b"hi")
        decision = composer.paste(PasteEvent(text="hi", items=[item]))
        self.assertIs(decision, PasteDecision.DEFAULT)
        await composer.tasks.await_all()
        self.assertEqual(composer.pending_attachments, [])

    async def test_warn_policy_ingests_and_logs(self) -> None:
        composer, _ = _make_composer(ComposerSettings(allow_image_attachment="warn"))
        with self.assertLogs("chat_composer.managers.paste", level="WARNING") as logs:
            composer.paste(PasteEvent(text=None, items=[_clipboard_image(0)]))
            await composer.tasks.await_all()
        self.assertEqual(len(composer.pending_attachments), 1)
        self.assertTrue(
            any("attachments.image_not_forwarded" in line for line in logs.output)
        )

    async def test_decode_failure_is_logged_and_dropped(self) -> None:
        composer, _ = _make_composer(normalize=_failing_normalize)
        composer.set_text("keep")
        with self.assertLogs(
            "chat_composer.managers.attachment", level="ERROR"
        ) as logs:
            composer.paste(PasteEvent(text=None, items=[_clipboard_image(0)]))
            await composer.tasks.await_all()
        self.assertEqual(composer.pending_attachments, [])
        self.assertEqual(composer.text, "keep")
        self.assertTrue(any("attachments.decode_failed" in line for line in logs.output))

    async def test_images_and_oversized_text_together(self) -> None:
        composer, _ = _make_composer()
        pasted = "\n" * 30
        decision = composer.paste(
            PasteEvent(text=pasted, items=[_clipboard_image(0)])
        )
        self.assertIs(decision, PasteDecision.SUPPRESS)
        await composer.tasks.await_all()
        self.assertEqual(len(composer.pending_attachments), 1)
        self.assertEqual(composer.text, wrap_snippet(pasted))


if __name__ == "__main__":
    unittest.main()

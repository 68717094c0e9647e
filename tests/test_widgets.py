"""
Tests for text shown by the entry page.
"""
from runtime_viewer.app.widgets import entry_caption, entry_heading
from runtime_viewer.core.io_handler import build_record


class TestEntryHeading:
    """Tests for the rich-text entry heading."""

    def test_markup_in_title_escaped(self):
        record = build_record({"ts": "2024-01-01T00:00:00Z", "msg": "Deleted /obj/<b>item</b> & co"})

        heading = entry_heading(record)

        assert heading == (
            "<b>[2024-01-01 00:00:00]</b> "
            "Deleted /obj/&lt;b&gt;item&lt;/b&gt; &amp; co"
        )

    def test_invalid_timestamp(self):
        record = build_record({"ts": "garbage", "msg": "hi"})
        assert entry_heading(record) == "<b>[Invalid Date]</b> hi"

    def test_plain_caption_unescaped(self):
        """List captions are plain text and keep the title as-is."""
        record = build_record({"ts": "2024-01-01T00:00:00Z", "msg": "a < b"})
        assert entry_caption(record) == "[2024-01-01 00:00:00] a < b"

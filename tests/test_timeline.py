"""Unit tests for the append-only message timeline."""
from hypothesis import given
from hypothesis import strategies as st

from insightchat.session import MessageTimeline, Speaker


class TestMessageTimeline:
    """Tests for MessageTimeline."""

    def test_empty(self):
        timeline = MessageTimeline()
        assert len(timeline) == 0
        assert timeline.last is None

    def test_append_returns_new_timeline(self):
        empty = MessageTimeline()
        one = empty.append(Speaker.BOT, "hello")

        assert len(empty) == 0
        assert len(one) == 1
        assert one[0].text == "hello"
        assert one[0].index == 0

    def test_html_is_kept(self):
        timeline = MessageTimeline().append(Speaker.USER, "bold", "<b>bold</b>")
        assert timeline.last.html == "<b>bold</b>"

    def test_older_prefix_unchanged(self):
        first = MessageTimeline().append(Speaker.BOT, "a")
        second = first.append(Speaker.USER, "b")
        assert second.messages[:1] == first.messages

    @given(st.lists(st.tuples(st.sampled_from(list(Speaker)), st.text(max_size=20)), max_size=30))
    def test_indices_are_positions(self, entries):
        """Property test: every message's index equals its position."""
        timeline = MessageTimeline()
        for speaker, text in entries:
            timeline = timeline.append(speaker, text)

        assert len(timeline) == len(entries)
        assert [m.index for m in timeline] == list(range(len(entries)))
        assert [(m.speaker, m.text) for m in timeline] == entries

    def test_equality_by_content(self):
        a = MessageTimeline().append(Speaker.BOT, "x")
        b = MessageTimeline().append(Speaker.BOT, "x")
        assert a == b
        assert hash(a) == hash(b)

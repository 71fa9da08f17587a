"""Rich-text input synchronization.

Hides the design decisions about:
- How visible text is projected out of markup (a pure function, not a
  platform text-extraction call)
- Which markup counts as "visually empty"
- How clipboard payloads become markup
- When the draft is re-read after a paste

The editing surface is an injected collaborator; this module never renders.
"""

import asyncio
import html
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from html.parser import HTMLParser

from pydantic import BaseModel, ConfigDict

from .models import EMPTY_DRAFT, Draft, Message

logger = logging.getLogger(__name__)

# Markup a browser-like surface leaves behind when the user deletes everything
_EMPTY_MARKUP = re.compile(
    r"^(?:<br\s*/?>|<div>\s*<br\s*/?>\s*</div>|<p>\s*(?:<br\s*/?>)?\s*</p>)$",
    re.IGNORECASE,
)
_LINE_TERMINATOR = re.compile(r"\r\n|\r|\n")
# HTML whitespace only: a non-breaking space is a visible character
_HTML_WHITESPACE = re.compile(r"[ \t\n\r\f]+")

BREAK_MARKER = "<br>"

_BLOCK_TAGS = frozenset({
    "p", "div", "li", "ul", "ol", "tr", "table", "thead", "tbody", "tfoot",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre",
    "section", "article", "header", "footer", "caption",
})
_CELL_TAGS = frozenset({"td", "th"})
_SKIP_TAGS = frozenset({"script", "style", "head", "template"})


class _TextProjector(HTMLParser):
    """Collects the visible text of a markup fragment.

    Block elements start new lines, <br> is an explicit line break and cells
    of one table row are tab separated. Whitespace runs collapse outside <pre>.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0
        self._pre_depth = 0
        self._pending_break = False
        self._row_has_cell = False

    def _last_char(self) -> str:
        for part in reversed(self._parts):
            if part:
                return part[-1]
        return ""

    def _line_break(self) -> None:
        if not self._pre_depth and self._parts:
            self._parts[-1] = self._parts[-1].rstrip(" ")
        self._parts.append("\n")

    def _flush_break(self) -> None:
        if self._pending_break:
            self._pending_break = False
            if self._last_char() not in ("", "\n"):
                self._line_break()

    def handle_starttag(self, tag: str, attrs) -> None:  # type: ignore[override]
        if tag in _SKIP_TAGS:
            self._skip_depth += 1
            return
        if self._skip_depth:
            return

        if tag == "br":
            self._flush_break()
            self._line_break()
        elif tag in _CELL_TAGS:
            if self._row_has_cell:
                self._pending_break = False
                self._parts.append("\t")
            self._row_has_cell = True
        elif tag in _BLOCK_TAGS:
            if tag == "tr":
                self._row_has_cell = False
            if tag == "pre":
                self._pre_depth += 1
            self._pending_break = True

    def handle_endtag(self, tag: str) -> None:  # type: ignore[override]
        if tag in _SKIP_TAGS:
            if self._skip_depth:
                self._skip_depth -= 1
            return
        if self._skip_depth:
            return

        if tag == "pre" and self._pre_depth:
            self._pre_depth -= 1
        if tag in _BLOCK_TAGS:
            self._pending_break = True

    def handle_data(self, data: str) -> None:  # type: ignore[override]
        if self._skip_depth:
            return

        if self._pre_depth:
            text = data
        else:
            text = _HTML_WHITESPACE.sub(" ", data)
            if self._pending_break or self._last_char() in ("", "\n", "\t", " "):
                text = text.lstrip(" ")
        if not text:
            return

        self._flush_break()
        self._parts.append(text)

    def text(self) -> str:
        return "".join(self._parts).strip(" \n")


def extract_text(markup: str) -> str:
    """Project markup onto its visible plain text.

    Args:
        markup: HTML fragment (bold/italic/lists/line breaks/tables)

    Returns:
        Visible text with tags removed, entities decoded and explicit
        line breaks turned into newlines
    """
    if not markup:
        return ""
    parser = _TextProjector()
    parser.feed(markup)
    parser.close()
    return parser.text()


def is_visually_empty(markup: str) -> bool:
    """True for markup that renders as nothing (e.g. a lone <br>)."""
    stripped = markup.strip()
    return not stripped or bool(_EMPTY_MARKUP.match(stripped))


def plain_text_to_markup(text: str) -> str:
    """Escape plain text and turn every line terminator into a <br> marker."""
    return _LINE_TERMINATOR.sub(BREAK_MARKER, html.escape(text, quote=False))


def preferred_text(message: Message) -> str:
    """Text used when a message is copied: the markup projection if present."""
    if message.html:
        return extract_text(message.html)
    return message.text


def draft_from_markup(markup: str) -> Draft:
    """Build the draft for a surface state, collapsing visually empty markup."""
    if is_visually_empty(markup):
        return EMPTY_DRAFT
    return Draft(html=markup, text=extract_text(markup))


class ClipboardPayload(BaseModel):
    """Representations offered by a paste event."""

    model_config = ConfigDict(frozen=True)

    html: str | None = None
    text: str | None = None

    def to_markup(self) -> str | None:
        """Markup to insert: rich markup verbatim, else converted plain text."""
        if self.html:
            return self.html
        if self.text:
            return plain_text_to_markup(self.text)
        return None


class EditableSurface(ABC):
    """The live editing surface the draft mirrors.

    Implementations own the caret; the synchronizer only reads the whole
    markup, replaces it, or inserts at the caret.
    """

    @property
    @abstractmethod
    def markup(self) -> str:
        """Current raw markup of the surface."""

    @abstractmethod
    def set_markup(self, markup: str) -> None:
        """Replace the surface content."""

    @abstractmethod
    def insert_markup(self, markup: str) -> None:
        """Insert markup at the caret."""

    def clear(self) -> None:
        self.set_markup("")


class MemorySurface(EditableSurface):
    """Headless surface: a markup buffer with a caret at a character offset."""

    def __init__(self, markup: str = "") -> None:
        self._markup = markup
        self._caret = len(markup)

    @property
    def markup(self) -> str:
        return self._markup

    @property
    def caret(self) -> int:
        return self._caret

    def move_caret(self, offset: int) -> None:
        self._caret = max(0, min(offset, len(self._markup)))

    def set_markup(self, markup: str) -> None:
        self._markup = markup
        self._caret = len(markup)

    def insert_markup(self, markup: str) -> None:
        self._markup = self._markup[:self._caret] + markup + self._markup[self._caret:]
        self._caret += len(markup)

    def type_text(self, text: str) -> None:
        """Simulate typing: the text is inserted as-is at the caret."""
        self.insert_markup(text)


class RichInputSynchronizer:
    """Keeps a Draft consistent with the live state of an editing surface.

    The draft is replaced in a single assignment so observers always see a
    matching markup/text pair.
    """

    def __init__(
        self,
        surface: EditableSurface,
        on_change: Callable[[Draft], None] | None = None,
    ) -> None:
        self._surface = surface
        self._on_change = on_change
        self._draft = EMPTY_DRAFT

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def surface(self) -> EditableSurface:
        return self._surface

    def capture(self) -> Draft:
        """Edit step: re-read the surface and publish the derived draft."""
        markup = self._surface.markup or ""
        draft = draft_from_markup(markup)
        if draft is EMPTY_DRAFT and markup:
            logger.debug("Collapsed visually empty markup %r", markup)
            self._surface.clear()
        self._publish(draft)
        return draft

    def handle_paste(self, payload: ClipboardPayload) -> asyncio.Handle:
        """Insert a clipboard payload and schedule the re-capture.

        The surface may settle after the insert returns, so the draft is read
        on the next loop iteration rather than here.
        """
        markup = payload.to_markup()
        if markup is not None:
            self._surface.insert_markup(markup)
            logger.debug(
                "Pasted %s payload (%d chars)", "html" if payload.html else "text", len(markup)
            )
        return asyncio.get_running_loop().call_soon(self.capture)

    def reset(self) -> None:
        """Clear the surface and the draft (after a submit)."""
        self._surface.clear()
        self._publish(EMPTY_DRAFT)

    def _publish(self, draft: Draft) -> None:
        self._draft = draft
        if self._on_change is not None:
            self._on_change(draft)

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional

import structlog

from richline.diff import rebase_on_text
from richline.formatting import apply_style
from richline.markup import parse, raw_text, serialize
from richline.models import Document, Selection, StyleKind
from richline.reconcile import reconcile
from richline.selection import tags_covering_range
from richline.tree import assert_coherent, check_range, document_length, empty_document

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EditorState:
    """
    Everything an editable field needs between two events.

    ``pending_styles`` holds styles toggled while the selection was collapsed;
    they are applied to the next inserted text.
    """

    document: Document = field(default_factory=empty_document)
    selection: Selection = field(default_factory=lambda: Selection.cursor(0))
    pending_styles: FrozenSet[StyleKind] = frozenset()

    @classmethod
    def from_markup(cls, markup: str) -> "EditorState":
        document = parse(markup or "")
        return cls(document=document, selection=Selection.cursor(document_length(document)))

    @property
    def active_styles(self) -> FrozenSet[StyleKind]:
        covering = tags_covering_range(self.document, self.selection.start, self.selection.end)
        if self.selection.is_collapsed:
            return covering ^ self.pending_styles
        return covering


class RichTextEditor:
    """
    Binds the engine to a plain text input.

    The host forwards the widget's text and selection events and the toolbar presses,
    then renders ``document`` and highlights ``active_styles``. ``on_change`` receives
    the markup after every change of content or styles.
    """

    def __init__(self, markup: str = "", on_change: Optional[Callable[[str], None]] = None):
        self.state = EditorState.from_markup(markup)
        self._on_change = on_change

    @property
    def document(self) -> Document:
        return self.state.document

    @property
    def selection(self) -> Selection:
        return self.state.selection

    @property
    def active_styles(self) -> FrozenSet[StyleKind]:
        return self.state.active_styles

    @property
    def markup(self) -> str:
        return serialize(self.state.document)

    @property
    def raw_text(self) -> str:
        return raw_text(self.state.document)

    def _commit(self, state: EditorState, operation: str):
        assert_coherent(state.document, operation)
        content_changed = state.document is not self.state.document
        self.state = state
        if content_changed and self._on_change:
            self._on_change(self.markup)

    def on_change_text(self, new_raw_text: str):
        state = self.state
        result = reconcile(state.document, state.selection, new_raw_text)
        if result.document is state.document and result.selection == state.selection:
            return

        document = result.document
        pending = state.pending_styles
        inserted = len(new_raw_text) - document_length(state.document)
        if pending and state.selection.is_collapsed and inserted > 0:
            start = state.selection.start
            for kind in sorted(pending, key=lambda k: k.value):
                document = apply_style(document, start, start + inserted, kind)
            logger.debug(f"Applied pending styles {sorted(k.value for k in pending)} to typed text")
            pending = frozenset()

        self._commit(EditorState(document, result.selection, pending), "on_change_text")

    def on_selection_change(self, start: int, end: int):
        selection = Selection(start=start, end=end)
        if selection == self.state.selection:
            return
        check_range(self.state.document, start, end)
        self.state = EditorState(self.state.document, selection)

    def on_apply_style(self, kind: StyleKind):
        state = self.state
        if state.selection.is_collapsed:
            # Nothing to wrap yet: remember the toggle for the next typed text
            self.state = EditorState(state.document, state.selection, state.pending_styles ^ {kind})
            return

        document = apply_style(state.document, state.selection.start, state.selection.end, kind)
        self._commit(EditorState(document, state.selection), "on_apply_style")

    def set_markup(self, markup: str):
        """Loads another value, as when the field is remounted for a different record."""
        self._commit(EditorState.from_markup(markup), "set_markup")

    def set_raw_text(self, new_raw_text: str):
        """Replaces the text programmatically, keeping the styles of unchanged characters."""
        document = rebase_on_text(self.state.document, new_raw_text)
        length = document_length(document)
        selection = Selection(
            start=min(self.state.selection.start, length),
            end=min(self.state.selection.end, length),
        )
        self._commit(EditorState(document, selection, self.state.pending_styles), "set_raw_text")

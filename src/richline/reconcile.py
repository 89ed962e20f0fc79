"""
Infers the edit behind a text-change event and applies it to the styled document.

Text inputs only report the full resulting string. The edit is recovered from the
previous document, the selection held just before the event and the new string.
"""

import structlog

from richline.errors import ReconcileError
from richline.markup import raw_text
from richline.models import Document, ReconcileResult, Selection
from richline.text_update import force_update_text, insert_text, remove_range, update_range
from richline.tree import assert_coherent, check_range

logger = structlog.get_logger(__name__)


def _clamp(value: int, length: int) -> int:
    return min(max(value, 0), length)


def reconcile(doc: Document, selection: Selection, new_raw_text: str) -> ReconcileResult:
    """
    Returns the document and selection matching ``new_raw_text``.

    ``selection`` is the selection as it was immediately before the change.
    Receiving the current text again (duplicate or late events) returns the inputs unchanged.
    """
    # 1. Duplicate event: nothing to do
    previous_text = raw_text(doc)
    if previous_text == new_raw_text:
        return ReconcileResult(doc, selection)

    check_range(doc, selection.start, selection.end)

    # 2. Infer the edit from the selection and the length change
    start, end = selection.start, selection.end
    delta = len(new_raw_text) - len(previous_text)

    if start != end:
        # Typing or pasting over a selected range
        if delta >= 0:
            replacement = new_raw_text[start : end + delta]
            logger.debug(f"Replacing [{start}, {end}) with {len(replacement)} character(s)")
            new_doc = update_range(doc, start, end, replacement)
        else:
            removal_start = max(end + delta, 0)
            new_doc = remove_range(doc, removal_start, removal_start - delta)
            replaced_length = end - start + delta
            if replaced_length > 0:
                new_doc = update_range(
                    new_doc, start, end + delta, new_raw_text[start : start + replaced_length]
                )
            logger.debug(f"Shrunk selection [{start}, {end}) by {-delta} character(s)")
        # Bounds are kept as they were, whatever the replacement length
        new_start, new_end = start, end

    elif delta > 0:
        inserted = new_raw_text[start : start + delta]
        logger.debug(f"Inserting {delta} character(s) at {start}")
        new_doc = insert_text(doc, start, inserted)
        new_start = new_end = start + delta

    elif delta < 0:
        # Backspace removes on the left of the cursor; at offset 0 it can only be a forward delete
        removal_start = max(start + delta, 0)
        logger.debug(f"Removing {-delta} character(s) at {removal_start}")
        new_doc = remove_range(doc, removal_start, removal_start - delta)
        new_start = new_end = start + delta

    else:
        # Same length, different content: characters were swapped just before the cursor
        # (autocorrect, or keystrokes delivered faster than state updates)
        changed = 0
        while start - changed - 1 >= 0 and new_raw_text[start - changed - 1] != previous_text[start - changed - 1]:
            changed += 1
        if changed:
            logger.debug(f"Rewriting {changed} character(s) before {start}")
            new_doc = update_range(doc, start - changed, start, new_raw_text[start - changed : start])
        else:
            new_doc = doc
        new_start = new_end = start - changed

    # 3. The inferred edit must rebuild the received text
    rebuilt_text = raw_text(new_doc)
    if rebuilt_text != new_raw_text:
        if len(rebuilt_text) == len(new_raw_text):
            logger.warning(
                f"Inferred text {rebuilt_text!r} differs from received text {new_raw_text!r}, overriding content"
            )
            new_doc = force_update_text(new_doc, new_raw_text)
        else:
            logger.error(
                f"Inferred text {rebuilt_text!r} has length {len(rebuilt_text)}, "
                f"received text has length {len(new_raw_text)}"
            )
            raise ReconcileError(
                f"reconciled text length {len(rebuilt_text)} does not match received length {len(new_raw_text)}"
            )

    assert_coherent(new_doc, "reconcile")

    # 4. Keep the selection inside the new text
    length = len(new_raw_text)
    new_selection = Selection(start=_clamp(new_start, length), end=_clamp(new_end, length))
    return ReconcileResult(new_doc, new_selection)

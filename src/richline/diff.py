from typing import List

import structlog
from diff_match_patch import diff_match_patch

from richline.errors import ReconcileError
from richline.markup import raw_text
from richline.models import ChangeType, Document, TextChange
from richline.text_update import insert_text, remove_range
from richline.tree import assert_coherent

logger = structlog.get_logger(__name__)


def describe_changes(original_text: str, modified_text: str) -> List[TextChange]:
    """
    Character-level diff of two raw texts.
    Positions are in the coordinates of the text being rewritten, so the changes can be
    replayed in order on ``original_text`` to obtain ``modified_text``.
    """
    dmp = diff_match_patch()
    diffs = dmp.diff_main(original_text, modified_text, False)

    changes = []
    # Cursor in the partially rewritten text
    position = 0

    for op, text in diffs:
        if op == 0:  # Equal
            position += len(text)
        elif op == -1:  # Delete
            # Deleted text disappears, the cursor stays where it is
            changes.append(TextChange(operation=ChangeType.DELETION, position=position, text=text))
        elif op == 1:  # Insert
            changes.append(TextChange(operation=ChangeType.INSERTION, position=position, text=text))
            position += len(text)

    return changes


def rebase_on_text(doc: Document, new_raw_text: str) -> Document:
    """
    Rewrites the raw text of ``doc`` to ``new_raw_text`` with as few character edits
    as possible, so that untouched characters keep their styles.

    Use this for text changes that do not come from a single keystroke at a known
    selection (programmatic value changes, autocorrect away from the cursor).
    """
    original_text = raw_text(doc)
    if original_text == new_raw_text:
        return doc

    changes = describe_changes(original_text, new_raw_text)
    logger.debug(f"Rebasing document on new text with {len(changes)} change(s)")

    for change in changes:
        if change.operation == ChangeType.DELETION:
            doc = remove_range(doc, change.position, change.position + len(change.text))
        else:
            doc = insert_text(doc, change.position, change.text)

    if raw_text(doc) != new_raw_text:
        logger.error(f"Rebase produced {raw_text(doc)!r} instead of {new_raw_text!r}")
        raise ReconcileError("rebased document does not match the requested text")

    assert_coherent(doc, "rebase_on_text")
    return doc

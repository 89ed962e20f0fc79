"""
Style-preserving text edits: insert, remove and replace raw text in a document.
All functions are pure and return canonical documents.
"""

import math
from typing import List, Tuple

import structlog

from richline.errors import InvalidRangeError, TextLengthMismatchError
from richline.markup import parse, raw_text, serialize
from richline.models import Document, Node, TagNode, TextNode
from richline.tree import (
    assert_coherent,
    check_offset,
    check_range,
    document_length,
    join,
    normalize,
    split_in_three,
)

logger = structlog.get_logger(__name__)


def _insert_into_leaf(node: Node, at: int, text: str) -> Tuple[Node, bool]:
    if isinstance(node, TextNode):
        cut = at - node.start
        return TextNode(node.value[:cut] + text + node.value[cut:], node.start, node.end + len(text)), True

    for idx, child in enumerate(node.children):
        # The leaf on the left of the insertion point wins, so typing extends the
        # previous style run. At offset 0 there is no left neighbour: use the first leaf.
        if child.start < at <= child.end or (at == 0 and idx == 0):
            new_child, inserted = _insert_into_leaf(child, at, text)
            children = node.children[:idx] + (new_child,) + node.children[idx + 1 :]
            return TagNode(node.kind, children, node.start, node.end + len(text)), inserted
    return node, False


def insert_text(doc: Document, at: int, text: str) -> Document:
    """Inserts ``text`` at offset ``at`` with the styles of the text on its left."""
    check_offset(doc, at)
    if not text:
        return doc

    result, inserted = _insert_into_leaf(doc, at, text)
    if not inserted:
        raise InvalidRangeError(f"no leaf found for insertion at {at}")

    result = normalize(result)
    assert_coherent(result, "insert_text")
    return result


def remove_range(doc: Document, start: int, end: int) -> Document:
    """Deletes ``[start, end)``. Tags left without content disappear."""
    check_range(doc, start, end)
    if start == end:
        return doc

    before, _, after = split_in_three(doc, start, end)
    result = join(before, after)
    assert_coherent(result, "remove_range")
    return result


def _append_to_last_leaf(node: Node, text: str) -> Node:
    if isinstance(node, TextNode):
        return TextNode(node.value + text, node.start, node.end + len(text))
    last = _append_to_last_leaf(node.children[-1], text)
    return TagNode(node.kind, node.children[:-1] + (last,), node.start, node.end + len(text))


def _prepend_to_first_leaf(node: Node, text: str) -> Node:
    if isinstance(node, TextNode):
        return TextNode(text + node.value, node.start, node.end + len(text))
    first = _prepend_to_first_leaf(node.children[0], text)
    return TagNode(node.kind, (first,) + node.children[1:], node.start, node.end + len(text))


def update_range(doc: Document, start: int, end: int, text: str) -> Document:
    """
    Replaces ``[start, end)`` by ``text``.
    The new text takes the styles of the text on the left of ``start``, or of the
    first remaining character when the span starts the document.
    """
    check_range(doc, start, end)
    before, _, after = split_in_three(doc, start, end)

    if text:
        if before is not None:
            before = _append_to_last_leaf(before, text)
        elif after is not None:
            after = _prepend_to_first_leaf(after, text)
        else:
            before = TextNode(text)

    # Offsets of the spliced parts are stale until this single merge pass
    result = join(before, after)
    assert_coherent(result, "update_range")
    return result


def _override_leaves(node: Node, text: str) -> Node:
    if isinstance(node, TextNode):
        return TextNode(text[node.start : node.end], node.start, node.end)
    return TagNode(node.kind, tuple(_override_leaves(child, text) for child in node.children), node.start, node.end)


def force_update_text(doc: Document, text: str) -> Document:
    """
    Replaces the characters of every leaf by the characters of ``text`` at the same
    offsets. Leaf and tag boundaries are left untouched.
    """
    if len(text) != document_length(doc):
        raise TextLengthMismatchError(
            f"cannot override a document of length {document_length(doc)} with a text of length {len(text)}"
        )
    return _override_leaves(doc, text)


def split_into_columns(markup: str, nb_columns: int) -> List[str]:
    """
    Splits styled text into ``nb_columns`` markup strings holding about the same
    number of words. Styles spanning a cut are closed and reopened on each side.
    """
    if nb_columns < 1:
        raise ValueError(f"nb_columns must be at least 1, got {nb_columns}")
    if nb_columns == 1:
        return [markup]

    doc = parse(markup)
    text = raw_text(doc)
    words = text.split(" ")
    words_per_column = math.ceil(len(words) / nb_columns)

    word_spans = []
    position = 0
    for word in words:
        word_spans.append((position, position + len(word)))
        position += len(word) + 1

    columns = []
    for idx in range(nb_columns):
        spans = word_spans[idx * words_per_column : (idx + 1) * words_per_column]
        if not spans:
            columns.append("")
            continue

        start, end = spans[0][0], spans[-1][1]
        if idx > 0:
            while start < end and text[start] == " ":
                start += 1

        _, inside, _ = split_in_three(doc, start, end)
        columns.append(serialize(normalize(inside)) if inside is not None else "")

    logger.debug(f"Split {len(words)} words into {nb_columns} columns")
    return columns

"""
Inline markup codec.

Markup is literal text with well-nested ``<kind>...</kind>`` spans, ``kind`` being one of
the ``StyleKind`` tag names. Parsing is fail-soft: anything that is not a well-nested
known tag is kept as literal text.
"""

import re
from typing import List

import structlog

from richline.models import Document, Node, StyleKind, TagNode, TextNode
from richline.tree import iter_leaves, normalize

logger = structlog.get_logger(__name__)

_TAG_NAMES = "|".join(re.escape(kind.value) for kind in StyleKind.styles())
_TAG_PATTERN = re.compile(rf"<(/?)({_TAG_NAMES})>")


class _OpenTag:
    """A tag seen in the markup whose closing tag has not been reached yet."""

    def __init__(self, kind: StyleKind, literal: str):
        self.kind = kind
        self.literal = literal
        self.children: List[Node] = []


def parse(markup: str) -> Document:
    """
    Parses markup into a canonical document.
    Unknown tags, stray closing tags and unterminated opening tags become literal text.
    """
    root = _OpenTag(StyleKind.ROOT, "")
    stack = [root]
    degraded = 0

    last_idx = 0
    for match in _TAG_PATTERN.finditer(markup):
        literal = markup[last_idx : match.start()]
        if literal:
            stack[-1].children.append(TextNode(literal))
        last_idx = match.end()

        is_closing, name = match.groups()
        kind = StyleKind(name)

        if not is_closing:
            stack.append(_OpenTag(kind, match.group(0)))
        elif len(stack) > 1 and stack[-1].kind == kind:
            closed = stack.pop()
            stack[-1].children.append(TagNode(kind, tuple(closed.children)))
        else:
            # Closing tag without a matching innermost opener
            degraded += 1
            stack[-1].children.append(TextNode(match.group(0)))

    remaining = markup[last_idx:]
    if remaining:
        stack[-1].children.append(TextNode(remaining))

    # Unterminated tags: keep the opener as text, splice its content into the parent
    while len(stack) > 1:
        unterminated = stack.pop()
        degraded += 1
        stack[-1].children.append(TextNode(unterminated.literal))
        stack[-1].children.extend(unterminated.children)

    if degraded:
        logger.warning(f"Markup contained {degraded} unbalanced tag(s), kept as literal text")

    return normalize(TagNode(StyleKind.ROOT, tuple(root.children)))


def _serialize_node(node: Node, parts: List[str]):
    if isinstance(node, TextNode):
        parts.append(node.value)
        return
    if node.kind.is_style:
        parts.append(f"<{node.kind.value}>")
    for child in node.children:
        _serialize_node(child, parts)
    if node.kind.is_style:
        parts.append(f"</{node.kind.value}>")


def serialize(node: Node) -> str:
    """Generates the markup string for a document (or any subtree)."""
    parts: List[str] = []
    _serialize_node(node, parts)
    return "".join(parts)


def raw_text(node: Node) -> str:
    """The text the host widget displays: every leaf value in document order."""
    return "".join(leaf.value for leaf, _ in iter_leaves(node))

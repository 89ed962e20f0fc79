"""
Structural helpers for the styled text tree.

Documents are immutable: every helper here returns new nodes. Offsets of nodes
produced by ``split_node`` are left as they were in the source tree; ``normalize``
is the single place that re-derives them.
"""

from typing import FrozenSet, Iterator, List, Optional, Sequence, Tuple

import structlog

from richline import config
from richline.errors import CoherenceError, InvalidRangeError
from richline.models import Document, Node, StyleKind, TagNode, TextNode

logger = structlog.get_logger(__name__)


def empty_document() -> Document:
    return TagNode(StyleKind.ROOT, (TextNode(""),), 0, 0)


def document_length(doc: Document) -> int:
    return doc.end - doc.start


def iter_leaves(
    node: Node, ancestors: Tuple[StyleKind, ...] = ()
) -> Iterator[Tuple[TextNode, Tuple[StyleKind, ...]]]:
    """Yields every leaf in document order with the styles wrapping it (outermost first)."""
    if isinstance(node, TextNode):
        yield node, ancestors
        return
    inner = ancestors + (node.kind,) if node.kind.is_style else ancestors
    for child in node.children:
        yield from iter_leaves(child, inner)


def check_range(doc: Document, start: int, end: int):
    length = document_length(doc)
    if start < 0 or end < start or end > length:
        raise InvalidRangeError(f"range [{start}, {end}) is invalid for a document of length {length}")


def check_offset(doc: Document, offset: int):
    length = document_length(doc)
    if offset < 0 or offset > length:
        raise InvalidRangeError(f"offset {offset} is outside a document of length {length}")


# --- Merge pass ---


def _canonical_children(children: Sequence[Node], active: FrozenSet[StyleKind]) -> List[Node]:
    flat: List[Node] = []
    for child in children:
        if isinstance(child, TextNode):
            if child.value:
                flat.append(child)
        elif not child.kind.is_style or child.kind in active:
            # Nested root or a style already applied by an ancestor: unwrap
            flat.extend(_canonical_children(child.children, active))
        else:
            inner = _canonical_children(child.children, active | {child.kind})
            if inner:
                flat.append(TagNode(child.kind, tuple(inner)))

    merged: List[Node] = []
    for node in flat:
        previous = merged[-1] if merged else None
        if isinstance(node, TextNode) and isinstance(previous, TextNode):
            merged[-1] = TextNode(previous.value + node.value)
        elif isinstance(node, TagNode) and isinstance(previous, TagNode) and node.kind == previous.kind:
            # The junction of the two runs may hold mergeable grandchildren
            joined = _canonical_children(previous.children + node.children, active | {node.kind})
            merged[-1] = TagNode(node.kind, tuple(joined))
        else:
            merged.append(node)
    return merged


def _reindex(node: Node, offset: int) -> Node:
    if isinstance(node, TextNode):
        return TextNode(node.value, offset, offset + len(node.value))
    children = []
    position = offset
    for child in node.children:
        child = _reindex(child, position)
        children.append(child)
        position = child.end
    return TagNode(node.kind, tuple(children), offset, position)


def normalize(node: Node) -> Document:
    """
    Returns the canonical document holding ``node``'s content:
    empty leaves and tags dropped, redundant nested styles unwrapped,
    adjacent mergeable siblings merged, offsets re-derived from 0.
    """
    source = node.children if isinstance(node, TagNode) and not node.kind.is_style else (node,)
    children = _canonical_children(source, frozenset())
    if not children:
        return empty_document()
    return _reindex(TagNode(StyleKind.ROOT, tuple(children)), 0)


def join(*parts: Optional[Node]) -> Document:
    """Concatenates nodes (typically pieces from ``split_in_three``) into one document."""
    return normalize(TagNode(StyleKind.ROOT, tuple(part for part in parts if part is not None)))


# --- Split pass ---


def split_node(node: Node, index: int) -> Tuple[Optional[Node], Optional[Node]]:
    """
    Splits ``node`` at document offset ``index``.
    Every tag straddling the offset is duplicated on both sides.
    Returns (first, second); a side is None when it holds no content.
    """
    if index < node.start or index > node.end:
        raise InvalidRangeError(f"cannot split node [{node.start}, {node.end}) at {index}")

    if isinstance(node, TextNode):
        cut = index - node.start
        first = TextNode(node.value[:cut], node.start, index) if cut > 0 else None
        second = TextNode(node.value[cut:], index, node.end) if index < node.end else None
        return first, second

    before: List[Node] = []
    after: List[Node] = []
    for child in node.children:
        if child.end <= index:
            before.append(child)
        elif child.start >= index:
            after.append(child)
        else:
            first, second = split_node(child, index)
            if first is not None:
                before.append(first)
            if second is not None:
                after.append(second)

    return (
        TagNode(node.kind, tuple(before), node.start, index) if before else None,
        TagNode(node.kind, tuple(after), index, node.end) if after else None,
    )


def split_in_three(
    root: Document, start: int, end: int
) -> Tuple[Optional[TagNode], Optional[TagNode], Optional[TagNode]]:
    """
    Returns the parts of ``root`` before ``start``, inside ``[start, end)`` and after ``end``.
    """
    check_range(root, start, end)
    before, rest = split_node(root, start)
    inside = after = None
    if rest is not None:
        inside, after = split_node(rest, end)
    return before, inside, after


# --- Coherence checks ---


def _mergeable(left: Node, right: Node) -> bool:
    if isinstance(left, TextNode) and isinstance(right, TextNode):
        return True
    return isinstance(left, TagNode) and isinstance(right, TagNode) and left.kind == right.kind


def _collect_problems(
    node: Node, offset: int, active: FrozenSet[StyleKind], sole_leaf: bool, problems: List[str]
) -> int:
    if node.start != offset:
        problems.append(f"{node!r} starts at {node.start}, expected {offset}")

    if isinstance(node, TextNode):
        if node.end - node.start != len(node.value):
            problems.append(f"leaf {node.value!r} spans [{node.start}, {node.end})")
        if not node.value and not sole_leaf:
            problems.append(f"empty leaf at {node.start}")
        return node.start + len(node.value)

    if node.kind in active:
        problems.append(f"<{node.kind.value}> nested under the same style at {node.start}")
    if not node.children:
        problems.append(f"empty <{node.kind.value}> at {node.start}")
        return node.start

    inner = active | {node.kind} if node.kind.is_style else active
    position = node.start
    previous = None
    for child in node.children:
        if isinstance(child, TagNode) and not child.kind.is_style:
            problems.append(f"nested root at {child.start}")
        if previous is not None and _mergeable(previous, child):
            problems.append(f"unmerged siblings at {child.start}")
        position = _collect_problems(child, position, inner, False, problems)
        previous = child

    if node.end != position:
        problems.append(f"<{node.kind.value}> ends at {node.end}, children end at {position}")
    return position


def coherence_problems(doc: Document) -> List[str]:
    problems: List[str] = []
    if not isinstance(doc, TagNode) or doc.kind is not StyleKind.ROOT:
        return [f"document root is {doc!r}"]
    if doc.start != 0:
        problems.append(f"document starts at {doc.start}")
    sole_leaf = len(doc.children) == 1 and isinstance(doc.children[0], TextNode)
    if sole_leaf:
        _collect_problems(doc.children[0], 0, frozenset(), True, problems)
        if doc.end != doc.children[0].end:
            problems.append(f"document ends at {doc.end}, leaf ends at {doc.children[0].end}")
    else:
        _collect_problems(doc, 0, frozenset(), False, problems)
    return problems


def check_coherence(doc: Document) -> bool:
    """
    True when offsets are consistent, leaves cover the raw text without gaps
    and the tree is in canonical form.
    """
    return not coherence_problems(doc)


def assert_coherent(doc: Document, operation: str = ""):
    """Raises CoherenceError on an incoherent document. No-op unless debug is enabled."""
    if not config.settings.debug:
        return
    problems = coherence_problems(doc)
    if problems:
        logger.error(f"Incoherent document after {operation or 'operation'}: {problems}")
        raise CoherenceError("; ".join(problems))

from typing import Tuple

import structlog

from richline.models import Document, Node, StyleKind, TagNode, TextNode
from richline.selection import tags_covering_range
from richline.tree import assert_coherent, check_range, join, normalize, split_in_three

logger = structlog.get_logger(__name__)


def _without_style(node: Node, kind: StyleKind) -> Tuple[Node, ...]:
    """Replaces every ``kind`` tag in the subtree by its children."""
    if isinstance(node, TextNode):
        return (node,)
    children = tuple(grandchild for child in node.children for grandchild in _without_style(child, kind))
    if node.kind == kind:
        return children
    return (TagNode(node.kind, children, node.start, node.end),)


def _wrap_in_style(node: TagNode, kind: StyleKind) -> TagNode:
    """
    Wraps the children of the lowest tag holding all of ``node``'s content
    in a single new ``kind`` tag.
    """
    if len(node.children) == 1 and isinstance(node.children[0], TagNode):
        return TagNode(node.kind, (_wrap_in_style(node.children[0], kind),), node.start, node.end)

    children = tuple(grandchild for child in node.children for grandchild in _without_style(child, kind))
    return TagNode(node.kind, (TagNode(kind, children, node.start, node.end),), node.start, node.end)


def apply_style(doc: Document, start: int, end: int, kind: StyleKind) -> Document:
    """
    Toggles ``kind`` over ``[start, end)``.

    The style is removed when it already covers the whole range and added otherwise.
    Text outside the range keeps its styles. A collapsed range leaves the document as is.
    """
    if not kind.is_style:
        raise ValueError(f"{kind!r} is not a style")
    check_range(doc, start, end)
    if start == end:
        return doc

    # 1. Toggle: remove only when the style already covers every character
    removing = kind in tags_covering_range(doc, start, end)
    before, inside, after = split_in_three(doc, start, end)

    # 2. Restyle the middle part alone
    if removing:
        logger.debug(f"Removing <{kind.value}> from [{start}, {end})")
        inside = TagNode(StyleKind.ROOT, _without_style(inside, kind), inside.start, inside.end)
    else:
        logger.debug(f"Adding <{kind.value}> to [{start}, {end})")
        inside = _wrap_in_style(inside, kind)

    # 3. Glue the parts back and merge the runs meeting at the cuts
    result = join(before, inside, after)
    assert_coherent(result, "apply_style")
    return result


def strip_style(doc: Document, kind: StyleKind) -> Document:
    """Removes ``kind`` from the whole document."""
    if not kind.is_style:
        raise ValueError(f"{kind!r} is not a style")
    result = normalize(TagNode(StyleKind.ROOT, _without_style(doc, kind)))
    assert_coherent(result, "strip_style")
    return result

from typing import FrozenSet, Optional

from richline.models import Document, StyleKind
from richline.tree import check_range, iter_leaves


def tags_covering_range(doc: Document, start: int, end: int) -> FrozenSet[StyleKind]:
    """
    Styles applied to the whole of ``[start, end)``.

    For a collapsed range, returns the styles that text typed at ``start`` would get:
    those of the character on the left of the cursor (of the first character at 0).
    """
    check_range(doc, start, end)

    if start == end:
        for leaf, ancestors in iter_leaves(doc):
            if leaf.start < start <= leaf.end or start == 0:
                return frozenset(ancestors)
        return frozenset()

    covering: Optional[FrozenSet[StyleKind]] = None
    for leaf, ancestors in iter_leaves(doc):
        if leaf.end <= start:
            continue
        if leaf.start >= end:
            break
        covering = frozenset(ancestors) if covering is None else covering & frozenset(ancestors)
        if not covering:
            break
    return covering or frozenset()

"""
Property tests for the invariants every public operation must keep:
round-trip of the markup, coverage of the raw text and canonical form.
"""

import re

from hypothesis import given, settings, strategies as st

from richline.formatting import apply_style
from richline.markup import parse, raw_text, serialize
from richline.models import Selection, StyleKind
from richline.reconcile import reconcile
from richline.text_update import insert_text, remove_range
from richline.tree import check_coherence, iter_leaves

# The host guarantees there is no literal '<' or '>' in the text
text_strategy = st.text(
    alphabet=st.characters(exclude_categories=("Cc", "Cs"), exclude_characters="<>"),
    max_size=6,
)
style_strategy = st.sampled_from(StyleKind.styles())


def _wrap(pair):
    kind, inner = pair
    return f"<{kind.value}>{inner}</{kind.value}>"


markup_strategy = st.recursive(
    text_strategy,
    lambda inner: st.one_of(
        st.lists(inner, min_size=1, max_size=4).map("".join),
        st.tuples(style_strategy, inner).map(_wrap),
    ),
    max_leaves=12,
)


def char_styles(doc):
    """The set of styles of every character, in order."""
    return [frozenset(ancestors) for leaf, ancestors in iter_leaves(doc) for _ in leaf.value]


@st.composite
def doc_and_range(draw):
    doc = parse(draw(markup_strategy))
    length = doc.end
    start = draw(st.integers(min_value=0, max_value=length))
    end = draw(st.integers(min_value=start, max_value=length))
    return doc, start, end


@settings(max_examples=200, deadline=None)
@given(markup=markup_strategy)
def test_round_trip(markup):
    doc = parse(markup)
    serialized = serialize(doc)

    assert parse(serialized) == doc
    assert serialize(parse(serialized)) == serialized
    assert check_coherence(doc)
    assert raw_text(doc) == re.sub(r"</?[^>]+>", "", markup)


@settings(max_examples=200, deadline=None)
@given(data=doc_and_range(), kind=style_strategy)
def test_apply_style_only_changes_the_range(data, kind):
    doc, start, end = data
    before = char_styles(doc)

    result = apply_style(doc, start, end, kind)
    after = char_styles(result)

    assert check_coherence(result)
    assert raw_text(result) == raw_text(doc)
    assert after[:start] == before[:start]
    assert after[end:] == before[end:]
    if start < end:
        removing = all(kind in styles for styles in before[start:end])
        expected = [styles - {kind} if removing else styles | {kind} for styles in before[start:end]]
        assert after[start:end] == expected


@settings(max_examples=100, deadline=None)
@given(data=doc_and_range(), text=text_strategy)
def test_insert_text_inherits_left_styles(data, text):
    doc, at, _ = data
    before = char_styles(doc)

    result = insert_text(doc, at, text)

    assert check_coherence(result)
    assert raw_text(result) == raw_text(doc)[:at] + text + raw_text(doc)[at:]
    if text and before:
        inherited = before[at - 1] if at > 0 else before[0]
        assert char_styles(result)[at : at + len(text)] == [inherited] * len(text)


@settings(max_examples=100, deadline=None)
@given(data=doc_and_range())
def test_remove_range_keeps_other_styles(data):
    doc, start, end = data
    before = char_styles(doc)

    result = remove_range(doc, start, end)

    assert check_coherence(result)
    assert raw_text(result) == raw_text(doc)[:start] + raw_text(doc)[end:]
    assert char_styles(result) == before[:start] + before[end:]


@settings(max_examples=200, deadline=None)
@given(data=doc_and_range(), new_text=text_strategy)
def test_reconcile_always_matches_received_text(data, new_text):
    doc, start, end = data

    result = reconcile(doc, Selection(start=start, end=end), new_text)

    assert raw_text(result.document) == new_text
    assert check_coherence(result.document)
    assert 0 <= result.selection.start <= result.selection.end <= len(new_text)


@settings(max_examples=50, deadline=None)
@given(data=doc_and_range())
def test_reconcile_same_text_is_idempotent(data):
    doc, start, end = data
    selection = Selection(start=start, end=end)

    result = reconcile(doc, selection, raw_text(doc))

    assert result.document is doc
    assert result.selection is selection

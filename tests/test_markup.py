"""
Tests for the inline markup codec.
"""

from richline.markup import parse, raw_text, serialize
from richline.models import StyleKind, TagNode, TextNode
from richline.tree import check_coherence


class TestParse:
    def test_plain_text(self):
        doc = parse("abc")

        assert doc == TagNode(StyleKind.ROOT, (TextNode("abc", 0, 3),), 0, 3)
        assert raw_text(doc) == "abc"
        assert serialize(doc) == "abc"

    def test_single_tag(self, bold_doc):
        assert serialize(bold_doc) == "<b>abc</b>"
        assert raw_text(bold_doc) == "abc"
        assert bold_doc.children == (TagNode(StyleKind.BOLD, (TextNode("abc", 0, 3),), 0, 3),)

    def test_empty_markup_gives_single_empty_leaf(self):
        doc = parse("")

        assert doc.children == (TextNode("", 0, 0),)
        assert doc.start == doc.end == 0
        assert serialize(doc) == ""

    def test_offsets_accumulate_left_to_right(self):
        doc = parse("a<b>bc</b>d")

        a, bold, d = doc.children
        assert (a.start, a.end) == (0, 1)
        assert (bold.start, bold.end) == (1, 3)
        assert bold.children == (TextNode("bc", 1, 3),)
        assert (d.start, d.end) == (3, 4)
        assert doc.end == 4

    def test_nested_tags(self):
        markup = "a<b>b<i>c</i></b>d"
        assert serialize(parse(markup)) == markup

    def test_size_tags(self):
        markup = "<+1>big</+1> <-2>small</-2> <+2><-1>mixed</-1></+2>"
        doc = parse(markup)

        assert serialize(doc) == markup
        assert raw_text(doc) == "big small mixed"

    def test_mixed_document_raw_text(self, mixed_doc):
        assert raw_text(mixed_doc) == "Hello big bold world"
        assert check_coherence(mixed_doc)


class TestCanonicalForm:
    def test_adjacent_same_tags_are_merged(self):
        assert serialize(parse("<b>a</b><b>b</b>")) == "<b>ab</b>"

    def test_redundant_nested_tag_is_unwrapped(self):
        assert serialize(parse("<b><b>x</b></b>")) == "<b>x</b>"
        assert serialize(parse("<b>a<i>b<b>c</b></i></b>")) == "<b>a<i>bc</i></b>"

    def test_empty_tags_are_dropped(self):
        assert serialize(parse("<b></b>x<i><u></u></i>")) == "x"

    def test_merge_cascades_into_children(self):
        assert serialize(parse("<b>x<i>a</i></b><b><i>b</i>y</b>")) == "<b>x<i>ab</i>y</b>"

    def test_different_tags_are_kept_apart(self):
        markup = "<i>a</i><b>b</b>"
        assert serialize(parse(markup)) == markup


class TestFailSoft:
    def test_unknown_tag_is_literal(self):
        doc = parse("<span>hi</span>")

        assert raw_text(doc) == "<span>hi</span>"
        assert serialize(doc) == "<span>hi</span>"

    def test_root_is_not_a_markup_tag(self):
        assert raw_text(parse("<root>x</root>")) == "<root>x</root>"

    def test_unterminated_tag_is_literal(self):
        doc = parse("<b>abc")

        assert raw_text(doc) == "<b>abc"
        assert doc.children == (TextNode("<b>abc", 0, 6),)

    def test_stray_closing_tag_is_literal(self):
        assert raw_text(parse("abc</b>")) == "abc</b>"

    def test_mismatched_closing_tag_inside_span(self):
        doc = parse("<b>x</i>y</b>")

        assert raw_text(doc) == "x</i>y"
        assert serialize(doc) == "<b>x</i>y</b>"

    def test_crossed_tags_degrade_to_text(self):
        doc = parse("<b><i>x</b>")

        assert raw_text(doc) == "<b><i>x</b>"
        assert check_coherence(doc)

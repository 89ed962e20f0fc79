import pytest

from richline.diff import describe_changes, rebase_on_text
from richline.markup import parse, serialize
from richline.models import ChangeType, TextChange
from richline.tree import check_coherence


def test_describe_insertion():
    assert describe_changes("abc", "abXc") == [TextChange(operation=ChangeType.INSERTION, position=2, text="X")]


def test_describe_deletion():
    assert describe_changes("abc", "ac") == [TextChange(operation=ChangeType.DELETION, position=1, text="b")]


def test_describe_identical_texts():
    assert describe_changes("same", "same") == []


def test_rebase_keeps_styles_of_untouched_text():
    doc = parse("<b>hello</b> world")

    result = rebase_on_text(doc, "hello brave world")

    assert serialize(result) == "<b>hello</b> brave world"
    assert check_coherence(result)


def test_rebase_replacement_inside_style():
    assert serialize(rebase_on_text(parse("<b>cat</b> dog"), "cot dog")) == "<b>cot</b> dog"


def test_rebase_several_changes():
    doc = parse("<i>one</i> two <b>three</b>")

    result = rebase_on_text(doc, "one 2 three!")

    assert serialize(result) == "<i>one</i> 2 <b>three!</b>"


def test_rebase_same_text_returns_document():
    doc = parse("<u>x</u>")
    assert rebase_on_text(doc, "x") is doc


@pytest.mark.parametrize("new_text", ["", "completely different"])
def test_rebase_to_any_text(new_text):
    result = rebase_on_text(parse("<b>ab</b>cd"), new_text)

    assert check_coherence(result)

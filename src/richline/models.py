from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple, Union

from pydantic import BaseModel, ConfigDict, model_validator


class StyleKind(str, Enum):
    """
    Inline styles understood by the markup codec and the formatting engine.
    The value is the tag name used in markup (``<b>...</b>``).
    """

    BOLD = "b"
    ITALIC = "i"
    UNDERLINE = "u"
    LARGER = "+1"
    LARGEST = "+2"
    SMALLER = "-1"
    SMALLEST = "-2"
    # Structural kind of the document node, never a style
    ROOT = "root"

    @property
    def is_style(self) -> bool:
        return self is not StyleKind.ROOT

    @classmethod
    def styles(cls) -> Tuple["StyleKind", ...]:
        return tuple(kind for kind in cls if kind.is_style)


@dataclass(frozen=True)
class TextNode:
    """A leaf holding a contiguous slice of the raw text."""

    value: str
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class TagNode:
    """One style applied to a contiguous run of children."""

    kind: StyleKind
    children: Tuple["Node", ...] = ()
    start: int = 0
    end: int = 0


Node = Union[TextNode, TagNode]

# A document is the implicit root tag (kind ROOT)
Document = TagNode


class Selection(BaseModel):
    """
    Selection in raw text offsets. A collapsed selection (start == end) is a cursor.
    """

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid selection [{self.start}, {self.end})")
        return self

    @classmethod
    def cursor(cls, position: int) -> "Selection":
        return cls(start=position, end=position)

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end


class ReconcileResult(NamedTuple):
    document: Document
    selection: Selection


class ChangeType(str, Enum):
    INSERTION = "INSERTION"
    DELETION = "DELETION"


class TextChange(BaseModel):
    """
    A single chunk of a raw text diff.
    ``position`` is expressed in the coordinates of the text being rewritten,
    after every previous change has been applied.
    """

    operation: ChangeType
    position: int
    text: str

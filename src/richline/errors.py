class RichTextError(Exception):
    """Base class for errors raised by the rich-text engine."""


class InvalidRangeError(RichTextError, ValueError):
    """A caller passed an offset or range outside the document."""


class TextLengthMismatchError(RichTextError, ValueError):
    """Content override requested with a text of a different length."""


class ReconcileError(RichTextError):
    """
    The reconciler produced a document whose raw text cannot be made to match
    the text reported by the host widget. This is a bug, not a user error.
    """


class CoherenceError(RichTextError, AssertionError):
    """A document violates the offset, coverage or canonical-form invariants."""

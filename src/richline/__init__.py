from importlib.metadata import PackageNotFoundError, version

from richline.diff import describe_changes, rebase_on_text
from richline.editor import EditorState, RichTextEditor
from richline.formatting import apply_style, strip_style
from richline.markup import parse, raw_text, serialize
from richline.models import Document, Selection, StyleKind, TagNode, TextNode
from richline.selection import tags_covering_range
from richline.text_update import force_update_text, insert_text, remove_range, split_into_columns, update_range
from richline.tree import check_coherence

try:
    __version__ = version("richline")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source/dev)
    __version__ = "0.0.0-dev"

__all__ = [
    "Document",
    "EditorState",
    "RichTextEditor",
    "Selection",
    "StyleKind",
    "TagNode",
    "TextNode",
    "apply_style",
    "check_coherence",
    "describe_changes",
    "force_update_text",
    "insert_text",
    "parse",
    "raw_text",
    "rebase_on_text",
    "remove_range",
    "serialize",
    "split_into_columns",
    "strip_style",
    "tags_covering_range",
    "update_range",
    "__version__",
]

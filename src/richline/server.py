from typing import Optional

import structlog
from mcp.server.fastmcp import FastMCP

from richline.config import configure_logging

# Stdout carries the MCP JSON-RPC protocol: logs must go to stderr.
configure_logging()

from richline.formatting import apply_style
from richline.markup import parse, raw_text, serialize
from richline.models import Selection, StyleKind
from richline.reconcile import reconcile
from richline.selection import tags_covering_range
from richline.text_update import split_into_columns

logger = structlog.get_logger(__name__)

mcp = FastMCP("Richline Styled Text Service")


@mcp.tool()
def raw_text_of_markup(markup: str) -> str:
    """
    Returns the plain text of a styled markup string (tags removed).
    Example: "<b>Hello</b> world" -> "Hello world".
    """
    return raw_text(parse(markup))


@mcp.tool()
def apply_style_to_markup(markup: str, start: int, end: int, style: StyleKind) -> str:
    """
    Toggles a style over the plain-text range [start, end) of a markup string and
    returns the new markup. The style is removed if it already covers the whole range.
    Styles: b (bold), i (italic), u (underline), +1/+2 (larger), -1/-2 (smaller).
    """
    try:
        return serialize(apply_style(parse(markup), start, end, style))
    except Exception as e:
        return f"Error applying style: {str(e)}"


@mcp.tool()
def styles_in_range(markup: str, start: int, end: int) -> list[str]:
    """
    Lists the styles covering the whole plain-text range [start, end) of a markup string.
    """
    try:
        return sorted(kind.value for kind in tags_covering_range(parse(markup), start, end))
    except Exception as e:
        return [f"Error reading styles: {str(e)}"]


@mcp.tool()
def reconcile_markup(markup: str, new_text: str, selection_start: int, selection_end: Optional[int] = None) -> dict:
    """
    Applies the change a plain text field made to the text of a markup string,
    keeping the styles. The selection is the one held just before the change.
    Returns the new markup and selection.
    """
    try:
        end = selection_start if selection_end is None else selection_end
        result = reconcile(parse(markup), Selection(start=selection_start, end=end), new_text)
        return {"markup": serialize(result.document), "selection": result.selection.model_dump()}
    except Exception as e:
        logger.warning(f"Reconcile tool failed: {e}")
        return {"error": f"Error reconciling text: {str(e)}"}


@mcp.tool()
def split_markup_into_columns(markup: str, columns: int) -> list[str]:
    """
    Splits a markup string into the given number of columns with a similar word count.
    """
    try:
        return split_into_columns(markup, columns)
    except Exception as e:
        return [f"Error splitting text: {str(e)}"]


if __name__ == "__main__":
    # Runs the server over stdio
    mcp.run()

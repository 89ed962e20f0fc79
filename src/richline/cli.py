import argparse
import json
import sys
from typing import List, Optional

from richline.errors import RichTextError
from richline.formatting import apply_style
from richline.markup import parse, raw_text, serialize
from richline.models import Selection, StyleKind
from richline.reconcile import reconcile
from richline.selection import tags_covering_range
from richline.text_update import split_into_columns

STYLE_CHOICES = [kind.value for kind in StyleKind.styles()]


def mode_text(args):
    print(raw_text(parse(args.markup)))


def mode_style(args):
    doc = parse(args.markup)
    print(serialize(apply_style(doc, args.start, args.end, StyleKind(args.kind))))


def mode_covering(args):
    doc = parse(args.markup)
    kinds = tags_covering_range(doc, args.start, args.end)
    print(" ".join(sorted(kind.value for kind in kinds)))


def mode_columns(args):
    for column in split_into_columns(args.markup, args.columns):
        print(column)


def mode_reconcile(args):
    doc = parse(args.markup)
    end = args.start if args.end is None else args.end
    result = reconcile(doc, Selection(start=args.start, end=end), args.new_text)
    output = {
        "markup": serialize(result.document),
        "selection": result.selection.model_dump(),
    }
    print(json.dumps(output, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="richline", description="Richline: styled text markup tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_text = subparsers.add_parser("text", help="Print the raw text of a markup string")
    p_text.add_argument("markup")
    p_text.set_defaults(func=mode_text)

    p_style = subparsers.add_parser("style", help="Toggle a style over a range")
    p_style.add_argument("markup")
    p_style.add_argument("--kind", required=True, choices=STYLE_CHOICES)
    p_style.add_argument("--start", type=int, required=True)
    p_style.add_argument("--end", type=int, required=True)
    p_style.set_defaults(func=mode_style)

    p_covering = subparsers.add_parser("covering", help="List the styles covering a range")
    p_covering.add_argument("markup")
    p_covering.add_argument("--start", type=int, required=True)
    p_covering.add_argument("--end", type=int, required=True)
    p_covering.set_defaults(func=mode_covering)

    p_columns = subparsers.add_parser("columns", help="Split a markup string into columns")
    p_columns.add_argument("markup")
    p_columns.add_argument("-n", "--columns", type=int, default=2)
    p_columns.set_defaults(func=mode_columns)

    p_reconcile = subparsers.add_parser("reconcile", help="Apply a text field change to a markup string")
    p_reconcile.add_argument("markup")
    p_reconcile.add_argument("new_text", help="Full text reported by the field after the change")
    p_reconcile.add_argument("--start", type=int, required=True, help="Selection start before the change")
    p_reconcile.add_argument("--end", type=int, help="Selection end before the change (defaults to start)")
    p_reconcile.set_defaults(func=mode_reconcile)

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except (RichTextError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""CLI entry point for mdword-export."""

import argparse
import json
import logging
import sys

from .config import DEFAULT_START_PAGE, ExportConfig
from .docx_renderer import convert
from .errors import ExportError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Reads markdown from --input (or stdin) and renders it into the template.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = argparse.ArgumentParser(
        description="Export Markdown to DOCX using a Word template"
    )
    parser.add_argument(
        "--template", "-t",
        help="Path to Word template (.docx or .docm); defaults to the bundled template"
    )
    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output path for generated document"
    )
    parser.add_argument(
        "--input", "-i",
        help="Input markdown file (default: read from stdin)"
    )
    parser.add_argument(
        "--start-page", "-p",
        type=int,
        default=DEFAULT_START_PAGE,
        help=f"Template page where content starts (default: {DEFAULT_START_PAGE})"
    )
    parser.add_argument(
        "--strict-styles",
        action="store_true",
        help="Fail if the template lacks the expected styles"
    )
    parser.add_argument(
        "--no-toc-refresh",
        action="store_true",
        help="Do not flag the template's table of contents for update"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log progress to stderr"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        # Read markdown
        if args.input:
            with open(args.input, "r", encoding="utf-8") as f:
                markdown = f.read()
        else:
            markdown = sys.stdin.buffer.read().decode("utf-8")

        config = ExportConfig(
            template_path=args.template,
            start_page=args.start_page,
            strict_styles=args.strict_styles,
            mark_toc_dirty=not args.no_toc_refresh,
        )

        output_path = convert(markdown, args.output, config)

        # Output success response
        print(json.dumps({
            "success": True,
            "output": str(output_path)
        }))
        return 0

    except (ExportError, OSError, UnicodeDecodeError) as e:
        print(json.dumps({
            "success": False,
            "error": str(e)
        }))
        return 1


if __name__ == "__main__":
    sys.exit(main())

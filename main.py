"""
mdpreview - render a Markdown document to preview HTML from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from internal.config.manager import DEFAULT_CONFIG_PATH, ConfigManager
from lib.logging_utils import initLogging
from lib.markdown_preview import MarkdownParser, RenderResult

# Configure basic logging first, replaced by initLogging() once the config is read
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


class PreviewRenderer:
    """Wires configuration, logging and the Markdown engine together."""

    def __init__(self, configPath: str = DEFAULT_CONFIG_PATH, configDirs: Optional[List[str]] = None,
                 configRequired: bool = False):
        self.configManager = ConfigManager(configPath, configDirs, required=configRequired)
        initLogging(self.configManager.getLoggingConfig())
        self.parser = MarkdownParser(self.configManager.getMarkdownOptions())

    def render(self, markdownText: str) -> RenderResult:
        return self.parser.render(markdownText)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="mdpreview - render Markdown to sanitized preview HTML")
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Markdown file to render, '-' for stdin (default: stdin)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "-d",
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write HTML to this file instead of stdout",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print parse statistics as JSON to stderr",
    )
    return parser.parse_args(argv)


def readInput(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "rt", encoding="utf-8") as f:
        return f.read()


def writeOutput(html: str, path: Optional[str]) -> None:
    if path is None:
        sys.stdout.write(html)
        sys.stdout.write("\n")
        return
    with open(path, "wt", encoding="utf-8") as f:
        f.write(html)
        f.write("\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    renderer = PreviewRenderer(
        configPath=args.config or DEFAULT_CONFIG_PATH,
        configDirs=args.config_dir,
        configRequired=args.config is not None,
    )

    try:
        markdownText = readInput(args.input)
    except OSError as e:
        logger.error(f"Failed to read {args.input}: {e}")
        return 1

    result = renderer.render(markdownText)

    try:
        writeOutput(result.html, args.output)
    except OSError as e:
        logger.error(f"Failed to write {args.output}: {e}")
        return 1

    if args.stats:
        print(json.dumps(result.stats.to_dict(), indent=2), file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())

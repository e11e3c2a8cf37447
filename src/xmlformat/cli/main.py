"""Main CLI entry point for the xmlformat command-line tool.

Reformats each named XML file (or standard input) and writes the result to
standard output or back to the file. A document with errors produces no
output; the remaining documents are still processed.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from xmlformat import __version__
from xmlformat.api import ProcessingMode, XMLFormatter
from xmlformat.formatting import line_wrap
from xmlformat.shared import FormatResult, configure_logging, get_logger
from xmlformat.shared.config import ConfigError, FormatConfig, load_config_file

PROG_NAME = "xmlformat"
CONFIG_ENV_VAR = "XMLFORMAT_CONF"
DEFAULT_CONFIG_FILE = "xmlformat.conf"
UNCONFIGURED_WRAP_LENGTH = 65

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Reformat XML documents according to per-element formatting options"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"{PROG_NAME} {__version__} (Python version)"
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="XML files to format (default: standard input)"
    )
    parser.add_argument(
        "--backup", "-b",
        metavar="SUFFIX",
        help="Back up each input file, adding SUFFIX to its name (requires --in-place)"
    )
    parser.add_argument(
        "--canonized-output",
        action="store_true",
        help="Stop after canonization and print the canonical document"
    )
    parser.add_argument(
        "--check-parser",
        action="store_true",
        help="Check that the document tokens concatenate back to the document"
    )
    parser.add_argument(
        "--config-file", "-f",
        type=Path,
        help=(
            f"Configuration file (default: ${CONFIG_ENV_VAR}, "
            f"else ./{DEFAULT_CONFIG_FILE} if it exists)"
        )
    )
    parser.add_argument(
        "--in-place", "-i",
        action="store_true",
        help="Replace each input file with its reformatted document"
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show the configuration options and exit"
    )
    parser.add_argument(
        "--show-unconfigured-elements",
        action="store_true",
        help="Show elements used in the document that have no configured options"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Report processing stages"
    )

    return parser


def resolve_config_path(
    explicit: Optional[Path],
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None
) -> Optional[Path]:
    """Choose the configuration file to read, if any.

    An explicit path wins, then the XMLFORMAT_CONF environment variable,
    then ``xmlformat.conf`` in the working directory when it is a file.
    """
    if explicit is not None:
        return explicit
    environ = os.environ if environ is None else environ
    if environ.get(CONFIG_ENV_VAR):
        return Path(environ[CONFIG_ENV_VAR])
    default_path = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILE
    if default_path.is_file():
        return default_path
    return None


def format_unconfigured(names: List[str]) -> str:
    """Render the unconfigured-element report."""
    if not names:
        return "The document contains no unconfigured elements."
    lines = ["The following document elements were assigned no formatting options:"]
    lines.extend(line_wrap([" ".join(sorted(names))], 0, 0, UNCONFIGURED_WRAP_LENGTH))
    return "\n".join(lines)


class DocumentProcessor:
    """Runs each input document through the formatter and routes output."""

    def __init__(self, formatter: XMLFormatter, args: argparse.Namespace) -> None:
        self.formatter = formatter
        self.args = args

    @property
    def mode(self) -> ProcessingMode:
        if self.args.check_parser:
            return ProcessingMode.CHECK_PARSER
        if self.args.canonized_output:
            return ProcessingMode.CANONIZE_ONLY
        if self.args.show_unconfigured_elements:
            return ProcessingMode.SHOW_UNCONFIGURED
        return ProcessingMode.FORMAT

    def process_text(self, text: str, label: str) -> FormatResult:
        """Process one document and print any non-document report."""
        result = self.formatter.process(text, self.mode, document=label)

        if self.mode == ProcessingMode.CHECK_PARSER:
            if result.parser_ok:
                print("Parser is okay")
            else:
                print("PARSER ERROR: document token concatenation differs from document")
            return result
        if self.mode == ProcessingMode.CANONIZE_ONLY and result.output is not None:
            output = result.output
            sys.stdout.write(output if output.endswith("\n") else output + "\n")
        elif self.mode == ProcessingMode.SHOW_UNCONFIGURED and result.success:
            print(format_unconfigured(sorted(result.unconfigured_elements)))

        for diagnostic in result.errors:
            print(f"{label}: {diagnostic}", file=sys.stderr)
        if not result.success:
            print("Cannot continue processing document.", file=sys.stderr)
        return result

    def process_stdin(self) -> bool:
        logger.info("Reading document...")
        result = self.process_text(sys.stdin.read(), "<stdin>")
        if self.mode == ProcessingMode.FORMAT and result.output is not None:
            sys.stdout.write(result.output)
        return result.success

    def process_file(self, path: Path) -> bool:
        logger.info(f"Reading document {path}...")
        try:
            text = path.read_text()
        except OSError as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            return False

        result = self.process_text(text, str(path))
        if self.mode != ProcessingMode.FORMAT or result.output is None:
            return result.success

        if self.args.in_place:
            if self.args.backup:
                backup_path = path.with_name(path.name + self.args.backup)
                logger.info(f"Making backup of {path} to {backup_path}...")
                path.rename(backup_path)
            logger.info(f"Writing output document to {path}...")
            path.write_text(result.output)
        else:
            logger.info("Writing output document...")
            sys.stdout.write(result.output)
        return result.success


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.backup and not args.in_place:
        print("--backup/-b option meaningless without --in-place/-i option",
              file=sys.stderr)
        return 1
    if args.in_place and not args.files:
        print("WARNING: --in-place/-i option ignored (requires named input files)",
              file=sys.stderr)

    config_path = resolve_config_path(args.config_file)
    try:
        if config_path is not None:
            logger.info("Reading configuration file...")
            config = load_config_file(config_path)
        else:
            config = FormatConfig()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.show_config:
        sys.stdout.write(config.describe())
        return 0

    processor = DocumentProcessor(XMLFormatter(config), args)
    try:
        if not args.files:
            ok = processor.process_stdin()
        else:
            ok = all([processor.process_file(path) for path in args.files])
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130

    logger.info("Done!")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

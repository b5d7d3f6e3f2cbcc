"""CLI entrypoints for ttsextract commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, ExtractConfig
from .download import ResourceFormatError
from .errors import ExtractionError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "-o",
        "--output",
        default=".",
        help="Output directory (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .ttsextract.yml file (defaults to the output directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ttsextract",
        description="Extract the components of a Tabletop Simulator save file.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract the components from a Tabletop Simulator save file.",
    )
    _add_common_options(extract_parser)
    extract_parser.add_argument(
        "save_file",
        nargs="?",
        default=None,
        help="Path of TTS save file (.json). May be omitted to read from stdin instead.",
    )
    extract_parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Extract everything, and unbundle included/required files.",
    )
    extract_parser.add_argument("-s", "--scripts", action="store_true", help="Extract scripts.")
    extract_parser.add_argument("-x", "--xml", action="store_true", help="Extract XML.")
    extract_parser.add_argument(
        "-l", "--linked", action="store_true", help="Save list of linked resources."
    )
    extract_parser.add_argument(
        "-n", "--notes", action="store_true", help="Extract Notebook entries."
    )
    extract_parser.add_argument(
        "-u", "--unbundle", action="store_true", help="Unbundle included/required files."
    )

    download_parser = subparsers.add_parser(
        "download",
        help="Download resources referenced by a Tabletop Simulator save file.",
    )
    _add_common_options(download_parser)

    return parser


def _extract_options(args: argparse.Namespace) -> ExtractConfig:
    if args.all:
        return ExtractConfig.everything()
    return ExtractConfig(
        scripts=bool(args.scripts),
        xml=bool(args.xml),
        linked=bool(args.linked),
        notes=bool(args.notes),
        unbundle=bool(args.unbundle),
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ttsextract commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()

    if args.command == "extract":
        try:
            orchestrator.run_extract(
                args.save_file,
                args.output,
                _extract_options(args),
                config_path=args.config,
            )
        except (ConfigError, FileNotFoundError) as exc:
            parser.exit(1, f"{exc}\n")
        except json.JSONDecodeError as exc:
            parser.exit(1, f"Save file is not valid JSON: {exc}\n")
        except ExtractionError as exc:
            parser.exit(1, f"ttsextract extract failed: {exc}\n")
    elif args.command == "download":
        try:
            orchestrator.run_download(args.output, config_path=args.config)
        except (ConfigError, FileNotFoundError, ResourceFormatError) as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

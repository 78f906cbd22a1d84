"""CLI entrypoints for tokenscout commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .detector import TokenDetector
from .exporters import FORMATS, write_tokens
from .extractor import token_count
from .logging import configure_logging
from .overrides import OverrideManager
from .pipeline import TokenPipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _add_sources_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated ecosystems to detect (e.g. tailwind,css-variables).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokenscout",
        description="Detect and extract design tokens from front-end projects.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser(
        "detect",
        help="List the token sources found in a project.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)
    _add_path_argument(detect_parser)
    _add_sources_option(detect_parser)
    detect_parser.add_argument(
        "--json",
        action="store_true",
        help="Print detected sources as JSON.",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract every detected source into one token file.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    _add_path_argument(extract_parser)
    _add_sources_option(extract_parser)
    extract_parser.add_argument(
        "--output",
        default=None,
        help="Directory for the token file and detection log (defaults to <path>/.tokenscout).",
    )
    extract_parser.add_argument(
        "--format",
        choices=FORMATS,
        default="dcp",
        help="Output format for extracted tokens.",
    )
    extract_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report instead of the console summary.",
    )

    init_parser = subparsers.add_parser(
        "init-config",
        help="Write a starter tokenscout.config.json with override examples.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    _add_path_argument(init_parser)
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )

    return parser


def _parse_sources(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    names = [name.strip() for name in raw.split(",") if name.strip()]
    return names or None


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for tokenscout commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "detect":
        _run_detect(parser, args)
    elif args.command == "extract":
        _run_extract(parser, args)
    elif args.command == "init-config":
        try:
            config_path = OverrideManager.create_sample_config(
                Path(args.path), overwrite=bool(args.force)
            )
        except FileExistsError as exc:
            parser.exit(1, f"{exc} (use --force to overwrite)\n")
        print(f"Configuration written to {_relativize(config_path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_detect(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    root = Path(args.path)
    if not root.is_dir():
        parser.exit(1, f"Project path does not exist: {root}\n")
    try:
        detector = TokenDetector(root, ecosystems=_parse_sources(args.sources))
        sources = detector.detect_all_sync()
    except ValueError as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"tokenscout detect failed: {exc}\nRun with --verbose for more details.\n")

    if args.json:
        print(json.dumps([source.to_dict() for source in sources], indent=2))
        return

    summary = detector.get_summary()
    print(f"Found {summary['total']} token source(s)")
    for tag, entries in summary["byType"].items():
        print(f"  {tag}:")
        for entry in entries:
            print(f"    {_relativize(Path(entry['path']))} ({entry['confidence'] * 100:.0f}%)")
    for recommendation in summary["recommendations"]:
        print(f"  - {recommendation}")


def _run_extract(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        pipeline = TokenPipeline(
            args.path,
            ecosystems=_parse_sources(args.sources),
            output_dir=args.output,
            verbose=bool(args.verbose),
        )
        result = pipeline.run_sync()
    except (FileNotFoundError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"tokenscout extract failed: {exc}\nRun with --verbose for more details.\n")

    if not result.sources:
        parser.exit(1, "No token sources detected. Run `tokenscout detect` to investigate.\n")

    output_file = write_tokens(result.tokens, pipeline.config.resolved_output_dir, args.format)
    total = token_count(result.tokens)

    if args.json:
        report = {
            "success": True,
            "outputFile": str(output_file),
            "logFile": str(result.log_path) if result.log_path else None,
            "totalTokens": total,
            "sources": result.tokens["meta"]["sources"],
        }
        print(json.dumps(report, indent=2))
        return

    print(f"Extracted {total} tokens from {len(result.sources)} source(s)")
    print(f"Output: {_relativize(output_file)}")
    pipeline.detection_log.print_summary()


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

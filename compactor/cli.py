import argparse
import json
import logging
import sys

from .config import (
    DEFAULT_OVERLAP_LINES,
    DEFAULT_SPLIT_PERCENT,
    SplitConfig,
    SummarizerConfig,
    validate_output_file,
)
from .errors import (
    CompactorError,
    FileReadError,
    FileWriteError,
    ParameterValidationError,
    SummarizationError,
)
from .operations import CompactSummary, compact_file


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"Invalid parameters: {message}\n")


def _write_json(payload: dict) -> None:
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _error_json(code: str, message: str, detail: str | None = None) -> None:
    _write_json({"ok": False, "error": {"code": code, "message": message, "detail": detail}})


def _echo_progress(chunk: str) -> None:
    sys.stderr.write(chunk)
    sys.stderr.flush()


def _report(summary: CompactSummary) -> str:
    split = summary.split
    return (
        f"Wrote {summary.output_path} (lines={split.total_lines}, summarized={split.part1_end}, "
        f"kept={len(split.part2)}, overlap={split.overlap})"
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def cmd_compact(args: argparse.Namespace) -> int:
    try:
        split_config = SplitConfig.from_dict({"split_percent": args.split, "overlap_lines": args.overlap})
        output_file = validate_output_file(args.output_file)
        summarizer_config = SummarizerConfig.from_env(model=args.model)
        summary = compact_file(
            args.input_file,
            split_config,
            summarizer_config,
            output_file=output_file,
            on_text=None if args.quiet else _echo_progress,
        )
    except Exception as exc:
        return _handle_cli_error(exc, as_json=args.json)
    if not args.quiet:
        sys.stderr.write("\n")
    if args.json:
        _write_json({"ok": True, "data": summary.to_dict()})
    else:
        print(_report(summary))
    return 0


def _describe(exc: Exception) -> tuple[str, str, str | None]:
    if isinstance(exc, ParameterValidationError):
        return "INVALID_PARAMETERS", "Invalid parameters", str(exc)
    if isinstance(exc, FileReadError):
        return "READ_ERROR", "Failed to read input", str(exc)
    if isinstance(exc, SummarizationError):
        detail = str(exc)
        if exc.status_code is not None:
            detail = f"{detail} (HTTP {exc.status_code})"
        if exc.detail:
            detail = f"{detail}: {exc.detail}"
        return "SUMMARIZATION_ERROR", "Summarization failed", detail
    if isinstance(exc, FileWriteError):
        return "WRITE_ERROR", "Failed to write output", str(exc)
    if isinstance(exc, CompactorError):
        return "COMPACTOR_ERROR", "Compaction failed", str(exc)
    return "UNKNOWN", "Unexpected error", str(exc)


def _handle_cli_error(exc: Exception, *, as_json: bool = False) -> int:
    code, message, detail = _describe(exc)
    logging.getLogger(__name__).debug("run aborted", exc_info=exc)
    if as_json:
        _error_json(code, message, detail)
    print(f"{message}: {detail}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="claude-compactor",
        description="Summarize the head of a conversation transcript and keep its tail verbatim.",
    )
    parser.add_argument("input_file", help="path to the transcript to compact")
    parser.add_argument(
        "--split",
        default=str(DEFAULT_SPLIT_PERCENT),
        metavar="1-100",
        help="percentage of lines to summarize before overlap is applied",
    )
    parser.add_argument(
        "--overlap",
        default=str(DEFAULT_OVERLAP_LINES),
        metavar="0-99999",
        help="lines shared between the summarized part and the kept part",
    )
    parser.add_argument("--model", help="summarization model identifier")
    parser.add_argument("--output-file", help="output path (default: generated name)")
    parser.add_argument("--quiet", action="store_true", help="do not echo the streamed summary")
    parser.add_argument("--json", action="store_true", help="print the run report as JSON")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    parser.set_defaults(func=cmd_compact)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

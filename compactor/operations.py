from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import SplitConfig, SummarizerConfig, validate_output_file
from .files import document_lines, read_text_file, write_text_file
from .paths import generate_output_filename
from .splitting import SplitResult, split_lines
from .summarizer import SummarizerClient


logger = logging.getLogger(__name__)

SUMMARY_END_MARKER = "-- End of conversation summary --"
RAW_START_MARKER = "-- Raw conversation starts below --"


@dataclass(frozen=True)
class CompactSummary:
    input_path: str
    output_path: str
    model: str
    split: SplitResult
    summary_chars: int
    output_chars: int

    def to_dict(self) -> dict:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "model": self.model,
            "split": self.split.to_dict(),
            "summary_chars": self.summary_chars,
            "output_chars": self.output_chars,
        }


def build_output(summary: str, part2: list[str]) -> str:
    return f"{summary}\n\n{SUMMARY_END_MARKER}\n{RAW_START_MARKER}\n\n{''.join(part2)}"


def compact_file(
    input_path: str,
    split_config: SplitConfig,
    summarizer_config: SummarizerConfig,
    *,
    output_file: str | None = None,
    on_text: Callable[[str], None] | None = None,
    client: SummarizerClient | None = None,
) -> CompactSummary:
    """Summarize the head of ``input_path`` and write it followed by the verbatim tail.

    The output file is written only after the summarization call has fully
    completed; any failure before that leaves no output behind.
    """
    output_path = validate_output_file(output_file) or generate_output_filename()
    lines = document_lines(read_text_file(input_path))
    split = split_lines(lines, split_config.split_percent, split_config.overlap_lines)
    logger.info(
        "split %d lines at %d%%: summarizing %d, keeping %d (overlap %d)",
        len(lines),
        split_config.split_percent,
        len(split.part1),
        len(split.part2),
        split.overlap,
    )

    summarizer = client or SummarizerClient(summarizer_config)
    try:
        summary = summarizer.summarize("".join(split.part1), on_text=on_text)
    finally:
        if client is None:
            summarizer.close()

    content = build_output(summary, split.part2)
    write_text_file(output_path, content)
    logger.info("wrote %s (%d chars)", output_path, len(content))
    return CompactSummary(
        input_path=input_path,
        output_path=output_path,
        model=summarizer_config.model,
        split=split,
        summary_chars=len(summary),
        output_chars=len(content),
    )

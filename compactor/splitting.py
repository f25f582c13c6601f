from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .config import MAX_OVERLAP_LINES, MAX_SPLIT_PERCENT, MIN_SPLIT_PERCENT, parse_int_in_range


@dataclass(frozen=True)
class SplitResult:
    part1: list[str]
    part2: list[str]
    split_index: int
    part1_end: int
    part2_start: int
    overlap: int

    @property
    def total_lines(self) -> int:
        return len(self.part1) + len(self.part2) - self.overlap

    def to_dict(self) -> dict[str, int]:
        return {
            "total_lines": self.total_lines,
            "split_index": self.split_index,
            "part1_end": self.part1_end,
            "part2_start": self.part2_start,
            "overlap": self.overlap,
            "part1_lines": len(self.part1),
            "part2_lines": len(self.part2),
        }


def split_lines(lines: Sequence[str], split_percent: int, overlap_lines: int) -> SplitResult:
    """Divide ``lines`` into two contiguous ranges that share up to ``overlap_lines``.

    The nominal boundary is ``floor(len(lines) * split_percent / 100)``. The
    overlap is clamped to the lines available on both sides of that boundary,
    so a split at 100% always leaves ``part2`` empty. ``part1`` always starts
    at line 0.
    """
    split_percent = parse_int_in_range(
        split_percent, name="split", minimum=MIN_SPLIT_PERCENT, maximum=MAX_SPLIT_PERCENT
    )
    overlap_lines = parse_int_in_range(overlap_lines, name="overlap", minimum=0, maximum=MAX_OVERLAP_LINES)
    total = len(lines)
    split_index = total * split_percent // 100
    overlap = min(overlap_lines, split_index, total - split_index)
    part1_end = min(split_index + overlap, total)
    part2_start = max(0, part1_end - overlap)
    return SplitResult(
        part1=list(lines[:part1_end]),
        part2=list(lines[part2_start:]),
        split_index=split_index,
        part1_end=part1_end,
        part2_start=part2_start,
        overlap=overlap,
    )

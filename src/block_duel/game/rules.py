from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 100
    four_line_score: int = 800
    four_line_garbage: int = 4

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if lines == 4:
            return self.four_line_score
        return lines * self.points_per_line

    def garbage_for_lines(self, lines: int) -> int:
        """Rows sent to the opponent; single clears send nothing."""
        if lines == 4:
            return self.four_line_garbage
        if lines > 1:
            return lines - 1
        return 0

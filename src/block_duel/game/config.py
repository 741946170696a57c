from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    spawn_x: int = 3
    spawn_y: int = 0
    lookahead: int = 5
    random_seed: Optional[int] = None
    # Scheduler timings in milliseconds
    drop_interval_ms: int = 800
    think_interval_ms: int = 350
    control_interval_ms: int = 100
    tick_ms: int = 50
    transient_ms: int = 300

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board must be non-empty, got {self.width}x{self.height}")
        if self.lookahead < 1:
            raise ValueError("lookahead must be at least 1")
        for name in ("drop_interval_ms", "think_interval_ms", "control_interval_ms", "tick_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional, get_args

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS = get_args(LogLevel)

@dataclass
class SimulationConfig:
    # sampling
    n: int = 1000
    seed: Optional[int] = 2025

    # testing
    confidence: float = 0.95        # correlation-test confidence interval
    alpha: float = 0.05             # significance level for the verdicts

    log_level: LogLevel = "INFO"

    def __post_init__(self):
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n < 4:
            raise ValueError("n must be an integer >= 4.")
        if not (0.0 < self.confidence < 1.0):
            raise ValueError("confidence must be in (0,1).")
        if not (0.0 < self.alpha < 1.0):
            raise ValueError("alpha must be in (0,1).")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}.")

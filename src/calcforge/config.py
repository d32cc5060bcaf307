"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

PERCENT_MODE_CALCULATOR = "calculator"
PERCENT_MODE_PLAIN = "plain"
PERCENT_MODES = (PERCENT_MODE_CALCULATOR, PERCENT_MODE_PLAIN)

DEFAULT_PRECISION = 12


@dataclass(frozen=True)
class EngineConfig:
    """Options for evaluating and displaying expressions.

    Attributes:
        percent_mode: "calculator" makes 200+10% mean 200 plus 10% of 200;
            "plain" makes every % a division by 100
        precision: Significant digits used when formatting results
    """

    percent_mode: str = PERCENT_MODE_CALCULATOR
    precision: int = DEFAULT_PRECISION

    def __post_init__(self) -> None:
        if self.percent_mode not in PERCENT_MODES:
            raise ValueError(
                f"Unknown percent mode '{self.percent_mode}'. "
                f"Expected one of: {', '.join(PERCENT_MODES)}."
            )
        if not 1 <= self.precision <= 17:
            raise ValueError(f"Precision must be between 1 and 17, got {self.precision}")

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        Resolution order for each option:
        1. CALCFORGE_PERCENT_MODE / CALCFORGE_PRECISION env vars
        2. Defaults
        """
        percent_mode = os.environ.get("CALCFORGE_PERCENT_MODE", PERCENT_MODE_CALCULATOR)

        precision_raw = os.environ.get("CALCFORGE_PRECISION")
        if precision_raw:
            try:
                precision = int(precision_raw)
            except ValueError:
                raise ValueError(
                    f"CALCFORGE_PRECISION must be an integer, got '{precision_raw}'"
                ) from None
        else:
            precision = DEFAULT_PRECISION

        return cls(percent_mode=percent_mode.strip().lower(), precision=precision)

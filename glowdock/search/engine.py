"""Optimization engine interface definitions."""

from __future__ import annotations

from typing import Protocol


class OptimizationEngine(Protocol):
    """Protocol for docking optimizers driven for a fixed number of steps."""

    def run(self, steps: int) -> None:
        """Run the optimizer, writing checkpoints along the way."""

        ...

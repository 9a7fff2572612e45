"""Per-step metrics logging for glowdock runs."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class RunLogger:
    """In-memory metrics buffer with optional incremental JSONL output.

    With ``live_write`` each metric is appended to ``metrics.jsonl`` as soon
    as it is logged, so a long simulation can be followed while it runs.

    PT-BR: a escrita incremental só acrescenta linhas; o flush final reescreve
    o arquivo a partir do buffer para que uma nova execução no mesmo swarm não
    misture registros antigos.
    """

    records: List[Dict[str, Any]] = field(default_factory=list)
    out_dir: str | None = None
    live_write: bool = False
    filename: str = "metrics.jsonl"

    def log_metric(self, name: str, value: float, step: int, extra: Optional[Dict[str, Any]] = None) -> None:
        payload: Dict[str, Any] = {"name": name, "value": float(value), "step": int(step)}
        if extra:
            payload.update(extra)
        self.records.append(payload)
        if self.live_write and self.out_dir:
            # PT-BR: escrita incremental permite acompanhar a simulação em tempo real.
            with open(os.path.join(self.out_dir, self.filename), "a", encoding="utf-8") as handle:
                handle.write(json.dumps(payload) + "\n")

    def log_step(self, step: int, metrics: Mapping[str, float]) -> None:
        """Log several metrics sharing the same GSO step."""

        for name, value in metrics.items():
            self.log_metric(name, value, step=step)

    def flush(self, out_dir: str | None = None) -> str:
        """Rewrite the full metrics file from the buffer."""

        target = out_dir or self.out_dir or "."
        path = os.path.join(target, self.filename)
        with open(path, "w", encoding="utf-8") as handle:
            for record in self.records:
                handle.write(json.dumps(record) + "\n")
        return path

    def flush_timeseries(self, out_dir: str | None = None) -> str:
        """Write one JSON object per step with every metric of that step."""

        steps: Dict[int, Dict[str, Any]] = {}
        for record in self.records:
            entry = steps.setdefault(record["step"], {"step": record["step"]})
            entry[record["name"]] = record["value"]

        target = out_dir or self.out_dir or "."
        path = os.path.join(target, "metrics.timeseries.jsonl")
        with open(path, "w", encoding="utf-8") as handle:
            for step in sorted(steps):
                handle.write(json.dumps(steps[step]) + "\n")
        return path

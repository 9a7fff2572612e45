"""Structured JSONL debug events for GSO runs."""

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

LOGGER = logging.getLogger(__name__)


class DebugLogger:
    """Append-only JSONL event log; every call is a no-op when disabled.

    PT-BR: falha ao abrir o arquivo desabilita o logger em vez de abortar a simulação.
    """

    LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30}

    def __init__(self, enabled: bool, path: str, level: str = "INFO", flush_every: int = 50) -> None:
        self.enabled = bool(enabled)
        self.path = path
        self.threshold = self.LEVELS.get(str(level).upper(), self.LEVELS["INFO"])
        self.flush_every = max(1, int(flush_every))
        self.run_id: Optional[str] = None
        self._handle: Optional[TextIO] = None
        self._pending = 0

        if self.enabled:
            try:
                os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
                self._handle = open(path, "a", encoding="utf-8")
            except OSError:
                LOGGER.warning("Could not open debug log at %s, debug events disabled", path)
                self.enabled = False

    def log(self, event: dict[str, Any], level: str = "INFO") -> None:
        if self._handle is None:
            return
        if self.LEVELS.get(level.upper(), self.LEVELS["INFO"]) < self.threshold:
            return
        payload = dict(event)
        payload.setdefault("ts_utc", datetime.now(timezone.utc).isoformat())
        if self.run_id and "run_id" not in payload:
            payload["run_id"] = self.run_id
        payload.setdefault("pid", os.getpid())
        payload.setdefault("thread", threading.get_ident())
        self._handle.write(json.dumps(payload, ensure_ascii=False) + "\n")
        self._pending += 1
        if self._pending >= self.flush_every:
            self._handle.flush()
            self._pending = 0

    def close(self) -> None:
        """PT-BR: fecha o arquivo; chamadas repetidas são seguras."""

        if self._handle is None:
            return
        try:
            self._handle.close()
        finally:
            self._handle = None
            self._pending = 0

    def __enter__(self) -> "DebugLogger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

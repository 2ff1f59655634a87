"""Transient user notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Notifier:
    """Collects short user-facing messages and forwards them to a sink.

    The sink plays the role of a toast: the CLI prints, tests inspect
    ``messages``.
    """

    def __init__(self, sink: Callable[[str], None] | None = None) -> None:
        self._sink = sink
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        logger.info("Aviso: %s", message)
        self.messages.append(message)
        if self._sink is not None:
            self._sink(message)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None

"""Main view controller: inventory tab, receipts tab, welcome banner."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from .comprobantes import ComprobantesController
from .inventory import InventoryStore
from .session import Route, SessionGate

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "¡Bienvenido al inventario!"


class Tab(str, Enum):
    INICIO = "inicio"
    COMPROBANTES = "comprobantes"


class MainView:
    """State owned by the main screen while it is shown.

    A fresh InventoryStore is created on ``enter`` and dropped on ``exit``.
    """

    def __init__(
        self,
        session: SessionGate,
        comprobantes: ComprobantesController,
        welcome_delay: float = 2.0,
        dark_mode: bool = False,
    ) -> None:
        self._session = session
        self.comprobantes = comprobantes
        self._welcome_delay = welcome_delay
        self.inventory: InventoryStore | None = None
        self.tab = Tab.INICIO
        self.show_welcome = False
        self.dark_mode = dark_mode
        self._welcome_task: asyncio.Task | None = None

    @property
    def display_name(self) -> str:
        return self._session.display_name

    def enter(self) -> InventoryStore:
        if self._session.route is not Route.MAIN:
            raise RuntimeError("Inicia sesión antes de abrir el inventario")
        self.inventory = InventoryStore()
        self.tab = Tab.INICIO
        self.show_welcome = True
        logger.info("Vista principal abierta para %s", self.display_name)
        return self.inventory

    async def hide_welcome_later(self) -> None:
        """Hide the welcome banner after the fixed delay."""
        await asyncio.sleep(self._welcome_delay)
        self.show_welcome = False

    def start_welcome_timer(self) -> asyncio.Task:
        """Schedule the banner to hide; must run inside an event loop."""
        self._welcome_task = asyncio.get_running_loop().create_task(
            self.hide_welcome_later()
        )
        return self._welcome_task

    def select_tab(self, tab: Tab | str) -> None:
        self.tab = Tab(tab)
        if self.tab is Tab.COMPROBANTES:
            self.comprobantes.refresh()

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    def exit(self) -> None:
        self.inventory = None
        self.show_welcome = False

    def sign_out(self) -> None:
        self.exit()
        self._session.sign_out()

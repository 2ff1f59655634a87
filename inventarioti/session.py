"""Session gate between the login view and the main view."""

from __future__ import annotations

import logging
from enum import Enum

from .auth import Account, IdentityProvider
from .db import PreferencesDB
from .notifications import Notifier

logger = logging.getLogger(__name__)

APP_PREFS_NAME = "app_prefs"
GUEST_KEY = "is_guest"
DEFAULT_DISPLAY_NAME = "Usuario"

MSG_SIGN_IN_FAILED = "Error al iniciar sesión con Google"
MSG_GUEST = "Ingresando como invitado"


class Route(str, Enum):
    LOGIN = "login"
    MAIN = "main"


class SessionGate:
    """Decides whether the user may reach the main view.

    A user gets through by signing in with the identity provider or by
    entering as a guest; failures leave the route on ``login``.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        app_prefs: PreferencesDB,
        notifier: Notifier,
    ) -> None:
        self._provider = provider
        self._prefs = app_prefs
        self._notifier = notifier
        self._account: Account | None = None
        self.route = Route.LOGIN

    @property
    def account(self) -> Account | None:
        return self._account

    @property
    def is_guest(self) -> bool:
        return self._prefs.get_bool(GUEST_KEY, False)

    @property
    def is_authenticated(self) -> bool:
        return self.route is Route.MAIN

    @property
    def display_name(self) -> str:
        if self._account is not None and self._account.display_name:
            return self._account.display_name
        return DEFAULT_DISPLAY_NAME

    def restore(self) -> Route:
        """Resume a previous session (cached account or guest flag)."""
        account = self._provider.last_signed_in_account()
        if account is not None:
            self._account = account
            self.route = Route.MAIN
        elif self.is_guest:
            self.route = Route.MAIN
        return self.route

    def sign_in_with_google(self) -> bool:
        try:
            account = self._provider.sign_in()
        except (RuntimeError, FileNotFoundError, ImportError) as e:
            logger.warning("Inicio de sesión fallido: %s", e)
            self._notifier.notify(MSG_SIGN_IN_FAILED)
            return False

        self._account = account
        self._prefs.put_bool(GUEST_KEY, False)
        self.route = Route.MAIN
        return True

    def enter_as_guest(self) -> None:
        self._prefs.put_bool(GUEST_KEY, True)
        self._account = None
        self._notifier.notify(MSG_GUEST)
        self.route = Route.MAIN

    def sign_out(self) -> None:
        self._provider.sign_out()
        self._prefs.remove(GUEST_KEY)
        self._account = None
        self.route = Route.LOGIN
        logger.info("Sesión cerrada")

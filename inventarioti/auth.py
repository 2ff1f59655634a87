"""Identity providers: Google account sign-in via OAuth 2.0."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Account:
    """A signed-in user."""

    email: str = ""
    display_name: str = ""
    id: str = ""


class IdentityProvider(ABC):
    """Abstract sign-in capability."""

    @abstractmethod
    def sign_in(self) -> Account:
        """Run the interactive sign-in flow.

        Raises:
            RuntimeError: If sign-in fails or is cancelled.
        """
        ...

    @abstractmethod
    def last_signed_in_account(self) -> Account | None:
        """Return the cached account, or None if nobody is signed in."""
        ...

    @abstractmethod
    def sign_out(self) -> None:
        ...


class GoogleIdentityProvider(IdentityProvider):
    """Sign in with a Google account using the installed-app OAuth flow.

    On first use, opens a browser for Google account authorization.
    The token is saved for subsequent use.
    """

    SCOPES = [
        "openid",
        "https://www.googleapis.com/auth/userinfo.email",
        "https://www.googleapis.com/auth/userinfo.profile",
    ]

    def __init__(
        self,
        credentials_path: str | Path = "~/.config/inventarioti/google_credentials.json",
        token_path: str | Path = "~/.config/inventarioti/google_token.json",
    ) -> None:
        self._credentials_path = Path(credentials_path).expanduser()
        self._token_path = Path(token_path).expanduser()
        self._account: Account | None = None

    @staticmethod
    def _import_google():
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
            from googleapiclient.discovery import build
        except ImportError:
            raise ImportError(
                "Faltan los paquetes de Google para iniciar sesión:\n"
                "  pip install google-auth google-auth-oauthlib google-api-python-client"
            )
        return Request, Credentials, InstalledAppFlow, build

    def _load_token(self, Credentials, Request):
        creds = Credentials.from_authorized_user_file(
            str(self._token_path), self.SCOPES
        )
        if creds.valid:
            return creds
        if creds.expired and creds.refresh_token:
            creds.refresh(Request())
            self._token_path.write_text(creds.to_json())
            return creds
        return None

    def _fetch_account(self, creds, build) -> Account:
        service = build("oauth2", "v2", credentials=creds, cache_discovery=False)
        info = service.userinfo().get().execute()
        return Account(
            email=info.get("email", ""),
            display_name=info.get("name", ""),
            id=info.get("id", ""),
        )

    def sign_in(self) -> Account:
        Request, Credentials, InstalledAppFlow, build = self._import_google()

        if not self._credentials_path.exists():
            raise FileNotFoundError(
                f"No se encontró el archivo de credenciales OAuth: "
                f"{self._credentials_path}\n"
                f"Descárgalo desde Google Cloud Console."
            )

        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self._credentials_path), self.SCOPES
            )
            creds = flow.run_local_server(port=0)
            account = self._fetch_account(creds, build)
        except Exception as e:
            raise RuntimeError(f"Error al iniciar sesión con Google: {e}") from e

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._account = account
        logger.info("Sesión iniciada: %s", account.email)
        return account

    def last_signed_in_account(self) -> Account | None:
        if self._account is not None:
            return self._account
        if not self._token_path.exists():
            return None

        Request, Credentials, _, build = self._import_google()
        try:
            creds = self._load_token(Credentials, Request)
            if creds is None:
                return None
            self._account = self._fetch_account(creds, build)
        except Exception:
            logger.exception("No se pudo restaurar la sesión de Google")
            return None
        return self._account

    def sign_out(self) -> None:
        self._account = None
        if self._token_path.exists():
            self._token_path.unlink()
            logger.info("Token de Google eliminado: %s", self._token_path)

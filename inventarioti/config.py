"""TOML configuration loader for the inventory app."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

_DEFAULT_DATA_DIR = "~/.local/share/inventarioti"
_DEFAULT_CREDENTIALS = "~/.config/inventarioti/google_credentials.json"
_DEFAULT_TOKEN = "~/.config/inventarioti/google_token.json"


@dataclass
class StorageConfig:
    data_dir: str = _DEFAULT_DATA_DIR

    @property
    def db_path(self) -> Path:
        return Path(self.data_dir).expanduser() / "prefs.db"

    @property
    def files_dir(self) -> Path:
        return Path(self.data_dir).expanduser() / "files"


@dataclass
class CameraConfig:
    index: int = 0
    cache_dir: str = "/tmp/inventarioti"


@dataclass
class GalleryConfig:
    media_root: str = "~"
    relative_path: str = "Pictures/Comprobantes"


@dataclass
class AuthConfig:
    credentials_path: str = _DEFAULT_CREDENTIALS
    token_path: str = _DEFAULT_TOKEN


@dataclass
class UIConfig:
    welcome_delay: float = 2.0
    dark_mode: bool = False


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    gallery: GalleryConfig = field(default_factory=GalleryConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The OAuth client secrets path can come from the environment.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    cam = raw.get("camera", {})
    gal = raw.get("gallery", {})
    ath = raw.get("auth", {})
    ui = raw.get("ui", {})
    log = raw.get("logging", {})

    # Resolve client secrets: config file → environment variable → default
    credentials_path = (
        ath.get("credentials_path", "")
        or os.environ.get("INVENTARIOTI_GOOGLE_CREDENTIALS", "")
        or _DEFAULT_CREDENTIALS
    )

    return AppConfig(
        storage=StorageConfig(
            data_dir=sto.get("data_dir", _DEFAULT_DATA_DIR),
        ),
        camera=CameraConfig(
            index=cam.get("index", 0),
            cache_dir=cam.get("cache_dir", "/tmp/inventarioti"),
        ),
        gallery=GalleryConfig(
            media_root=gal.get("media_root", "~"),
            relative_path=gal.get("relative_path", "Pictures/Comprobantes"),
        ),
        auth=AuthConfig(
            credentials_path=credentials_path,
            token_path=ath.get("token_path", _DEFAULT_TOKEN),
        ),
        ui=UIConfig(
            welcome_delay=float(ui.get("welcome_delay", 2.0)),
            dark_mode=ui.get("dark_mode", False),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "INFO")).upper(),
        ),
    )

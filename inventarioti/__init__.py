"""Technical-support equipment inventory with photographic delivery receipts."""

from .auth import Account, GoogleIdentityProvider, IdentityProvider
from .camera import ReceiptCamera
from .comprobantes import ComprobantesController
from .config import (
    AppConfig,
    AuthConfig,
    CameraConfig,
    GalleryConfig,
    StorageConfig,
    UIConfig,
    load_config,
)
from .gallery import GalleryExporter
from .inventory import InventoryStore
from .main_view import MainView, Tab
from .models import Comprobante, InventoryItem
from .notifications import Notifier
from .receipts import ReceiptStore
from .session import Route, SessionGate

__all__ = [
    "InventoryItem",
    "Comprobante",
    "InventoryStore",
    "ReceiptStore",
    "ComprobantesController",
    "ReceiptCamera",
    "GalleryExporter",
    "IdentityProvider",
    "GoogleIdentityProvider",
    "Account",
    "SessionGate",
    "Route",
    "MainView",
    "Tab",
    "Notifier",
    "AppConfig",
    "StorageConfig",
    "CameraConfig",
    "GalleryConfig",
    "AuthConfig",
    "UIConfig",
    "load_config",
]

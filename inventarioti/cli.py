"""CLI entry point for the inventory app."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import shlex
import sys
from collections.abc import Callable
from dataclasses import dataclass

from dotenv import load_dotenv

from .auth import GoogleIdentityProvider
from .camera import ReceiptCamera
from .comprobantes import ComprobantesController
from .config import AppConfig, load_config
from .db import PreferencesDB
from .gallery import GalleryExporter
from .inventory import InventoryStore
from .main_view import WELCOME_MESSAGE, MainView
from .models import Comprobante, InventoryItem
from .notifications import Notifier
from .receipts import PREFS_NAME, ReceiptStore
from .session import APP_PREFS_NAME, Route, SessionGate


@dataclass
class _App:
    config: AppConfig
    notifier: Notifier
    gate: SessionGate
    comprobantes: ComprobantesController
    prefs: list[PreferencesDB]

    def close(self) -> None:
        for p in self.prefs:
            p.close()


def _build_app(config: AppConfig) -> _App:
    notifier = Notifier(sink=print)
    db_path = config.storage.db_path
    app_prefs = PreferencesDB(APP_PREFS_NAME, db_path)
    receipt_prefs = PreferencesDB(PREFS_NAME, db_path)

    provider = GoogleIdentityProvider(
        credentials_path=config.auth.credentials_path,
        token_path=config.auth.token_path,
    )
    gate = SessionGate(provider, app_prefs, notifier)
    controller = ComprobantesController(
        store=ReceiptStore(receipt_prefs),
        files_dir=config.storage.files_dir,
        notifier=notifier,
        camera=ReceiptCamera(config.camera.index, config.camera.cache_dir),
        gallery=GalleryExporter(
            config.gallery.media_root, config.gallery.relative_path
        ),
    )
    return _App(config, notifier, gate, controller, [app_prefs, receipt_prefs])


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="inventarioti",
        description="Inventario de soporte técnico: equipos y comprobantes de entrega",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=os.environ.get("INVENTARIOTI_CONFIG"),
        help="Ruta del archivo de configuración (TOML)",
    )

    sub = parser.add_subparsers(dest="command")

    login_parser = sub.add_parser("login", help="Iniciar sesión con Google")
    login_parser.add_argument(
        "--guest", action="store_true", help="Ingresar como invitado"
    )
    sub.add_parser("logout", help="Cerrar sesión")
    sub.add_parser("whoami", help="Mostrar el usuario actual")
    sub.add_parser("cameras", help="Listar cámaras disponibles")
    sub.add_parser("shell", help="Sesión interactiva de inventario")

    comp = sub.add_parser("comprobantes", help="Gestionar comprobantes")
    comp_sub = comp.add_subparsers(dest="action")

    list_parser = comp_sub.add_parser("list", help="Listar comprobantes")
    list_parser.add_argument("--search", "-s", type=str, default="", help="Filtrar por nombre")
    list_parser.add_argument("--json", action="store_true", help="Salida en JSON")

    add_parser = comp_sub.add_parser("add", help="Nuevo comprobante")
    add_parser.add_argument("nombre", type=str)
    add_parser.add_argument("--image", type=str, default=None, help="Usar una imagen existente")

    rename_parser = comp_sub.add_parser("rename", help="Cambiar el nombre")
    rename_parser.add_argument("index", type=int)
    rename_parser.add_argument("nombre", type=str)

    photo_parser = comp_sub.add_parser("photo", help="Cambiar la foto")
    photo_parser.add_argument("index", type=int)
    photo_parser.add_argument("--image", type=str, default=None, help="Usar una imagen existente")

    delete_parser = comp_sub.add_parser("delete", help="Eliminar comprobante")
    delete_parser.add_argument("index", type=int)
    delete_parser.add_argument("--yes", "-y", action="store_true", help="No pedir confirmación")

    download_parser = comp_sub.add_parser("download", help="Guardar en la galería")
    download_parser.add_argument("index", type=int)

    args = parser.parse_args(argv)

    if args.command is None or (args.command == "comprobantes" and args.action is None):
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "cameras":
        _cmd_cameras()
        return

    app = _build_app(config)
    try:
        match args.command:
            case "login":
                _cmd_login(app, args)
            case "logout":
                app.gate.sign_out()
                print("Sesión cerrada.")
            case "whoami":
                _cmd_whoami(app)
            case "shell":
                _require_session(app)
                _cmd_shell(app)
            case "comprobantes":
                _require_session(app)
                _cmd_comprobantes(app, args)
    finally:
        app.close()


def _require_session(app: _App) -> None:
    if app.gate.restore() is not Route.MAIN:
        print(
            "Inicia sesión primero: inventarioti login [--guest]",
            file=sys.stderr,
        )
        sys.exit(1)


def _cmd_cameras() -> None:
    cameras = ReceiptCamera.list_cameras()
    if not cameras:
        print("No se encontraron cámaras disponibles.")
        return
    print(f"Cámaras disponibles: {len(cameras)}")
    for idx in cameras:
        print(f"  cámara {idx}")


def _cmd_login(app: _App, args) -> None:
    if args.guest:
        app.gate.enter_as_guest()
        return
    if not app.gate.sign_in_with_google():
        sys.exit(1)
    print(f"Sesión iniciada como {app.gate.display_name}")


def _cmd_whoami(app: _App) -> None:
    route = app.gate.restore()
    if route is not Route.MAIN:
        print("Sin sesión")
    elif app.gate.account is not None:
        print(f"{app.gate.display_name} <{app.gate.account.email}>")
    else:
        print(f"{app.gate.display_name} (invitado)")


def _pick(app: _App, index: int) -> Comprobante:
    records = app.comprobantes.refresh()
    if not 1 <= index <= len(records):
        print(f"Índice fuera de rango: {index}", file=sys.stderr)
        sys.exit(1)
    return records[index - 1]


def _cmd_comprobantes(app: _App, args) -> None:
    ctl = app.comprobantes

    match args.action:
        case "list":
            records = ctl.refresh()
            matches = ctl.search(args.search)
            if args.json:
                print(json.dumps([r.to_dict() for r in matches], ensure_ascii=False, indent=2))
                return
            shown = [(idx, r) for idx, r in enumerate(records, start=1) if r in matches]
            if not shown:
                print("No hay comprobantes.")
                return
            for idx, r in shown:
                print(f"  {idx:>3}. {r.nombre}")
                print(f"       Agregado el: {r.fecha}  Hora: {r.hora}")
        case "add":
            if args.image:
                result = ctl.add_from_file(args.image, args.nombre)
            else:
                result = ctl.capture(args.nombre)
            if result is None:
                sys.exit(1)
        case "rename":
            if ctl.rename(_pick(app, args.index), args.nombre) is None:
                sys.exit(1)
        case "photo":
            if ctl.replace_photo(_pick(app, args.index), args.image) is None:
                sys.exit(1)
        case "delete":
            record = _pick(app, args.index)
            if not args.yes:
                answer = input(f"¿Eliminar «{record.nombre}»? [s/N] ").strip().lower()
                if answer not in ("s", "si", "sí", "y", "yes"):
                    return
            ctl.delete(record)
        case "download":
            if ctl.download(_pick(app, args.index)) is None:
                sys.exit(1)


_SHELL_HELP = """\
Comandos:
  lista [texto]                           listar equipos
  agregar NOMBRE SERIE ESTADO CANTIDAD    agregar equipo
  editar N NOMBRE SERIE ESTADO CANTIDAD   editar equipo N
  quitar N CANTIDAD                       descontar unidades del equipo N
  borrar N                                eliminar equipo N
  vaciar                                  eliminar todo
  tema                                    alternar modo oscuro
  salir"""


def _print_items(items: list[InventoryItem], out: Callable[[str], None]) -> None:
    if not items:
        out("Inventario vacío.")
        return
    for n, item in enumerate(items, start=1):
        out(
            f"  {n:>3}. {item.name}  N° de Serie: {item.serial_number}  "
            f"Estado: {item.status}  Cantidad: {item.quantity}"
        )


def run_shell(
    view: MainView,
    input_fn: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> InventoryStore:
    """Interactive inventory session on an entered main view.

    The welcome banner stays up for the view's delay before the first prompt.
    """
    store = view.enter()
    out(f"{WELCOME_MESSAGE} {view.display_name}")
    asyncio.run(view.hide_welcome_later())
    out(_SHELL_HELP)

    def item_at(raw: str) -> InventoryItem | None:
        try:
            return store.items[int(raw) - 1]
        except (ValueError, IndexError):
            out(f"Equipo no encontrado: {raw}")
            return None

    while True:
        try:
            line = input_fn("inventario> ")
        except EOFError:
            break
        try:
            parts = shlex.split(line)
        except ValueError as e:
            out(f"Entrada inválida: {e}")
            continue
        if not parts:
            continue
        cmd, rest = parts[0].lower(), parts[1:]

        if cmd == "salir":
            break
        elif cmd == "lista":
            _print_items(store.search(" ".join(rest)), out)
        elif cmd == "agregar" and len(rest) == 4:
            try:
                store.upsert(InventoryItem.from_form(*rest))
            except ValueError as e:
                out(str(e))
        elif cmd == "editar" and len(rest) == 5:
            current = item_at(rest[0])
            if current is not None:
                try:
                    store.upsert(InventoryItem.from_form(*rest[1:], item_id=current.id))
                except ValueError as e:
                    out(str(e))
        elif cmd == "quitar" and len(rest) == 2:
            current = item_at(rest[0])
            if current is not None:
                try:
                    amount = int(rest[1])
                except ValueError:
                    amount = 0
                if not store.reduce_quantity(current, amount):
                    out(f"Cantidad inválida (1..{current.quantity})")
        elif cmd == "borrar" and len(rest) == 1:
            current = item_at(rest[0])
            if current is not None:
                store.remove(current)
        elif cmd == "vaciar":
            store.clear()
        elif cmd == "tema":
            out("Modo oscuro" if view.toggle_dark_mode() else "Modo claro")
        else:
            out(_SHELL_HELP)

    view.exit()
    return store


def _cmd_shell(app: _App) -> None:
    view = MainView(
        session=app.gate,
        comprobantes=app.comprobantes,
        welcome_delay=app.config.ui.welcome_delay,
        dark_mode=app.config.ui.dark_mode,
    )
    run_shell(view)

"""Blueprint registration helpers."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path
from typing import Iterable

from flask import Blueprint, Flask

PLUGIN_PACKAGE = "plugins"


def iter_plugin_packages(package: str = PLUGIN_PACKAGE) -> Iterable[str]:
    """Yield import paths for all plugin packages."""

    module_path = Path(__file__).resolve().parent.parent / package
    if not module_path.exists():
        return []
    return [
        f"{package}.{module_info.name}"
        for module_info in pkgutil.iter_modules([str(module_path)])
        if module_info.ispkg
    ]


def _iter_blueprints(package: str = PLUGIN_PACKAGE) -> Iterable[Blueprint]:
    blueprints: list[Blueprint] = []
    for dotted in iter_plugin_packages(package):
        module = importlib.import_module(f"{dotted}.api")
        module_blueprints = getattr(module, "blueprints", None)
        if module_blueprints:
            blueprints.extend(module_blueprints)
            continue
        blueprint = getattr(module, "bp", None)
        if blueprint is not None:
            blueprints.append(blueprint)
    return blueprints


def register_plugin_blueprints(app: Flask) -> None:
    for bp in _iter_blueprints():
        app.register_blueprint(bp)


__all__ = ["iter_plugin_packages", "register_plugin_blueprints"]

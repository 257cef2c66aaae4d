"""Blueprint registry for the LangFu feature modules.

Every feature package under ``langfu_app.modules`` exposes one blueprint from
its ``routes`` module. ``DEFAULT_MODULES`` lists them with the URL prefix they
are mounted at; the app factory walks the list instead of importing each
routes module by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string

MODULES_PACKAGE = "langfu_app.modules"
REGISTRY_KEY = "langfu_modules"


@dataclass(frozen=True)
class ModuleDefinition:
    """A feature package and where its blueprint is mounted."""

    name: str
    url_prefix: Optional[str] = None

    @property
    def import_path(self) -> str:
        return f"{MODULES_PACKAGE}.{self.name}.routes"

    @property
    def attribute(self) -> str:
        return f"{self.name}_bp"

    def load_blueprint(self) -> Blueprint:
        module = import_string(self.import_path)
        blueprint = getattr(module, self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Expected '%s.%s' to be a Flask Blueprint, got %r"
                % (self.import_path, self.attribute, type(blueprint))
            )
        return blueprint


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> Dict[str, Optional[str]]:
    """Register each module's blueprint and record its prefix on ``app.extensions``."""

    registered = app.extensions.setdefault(REGISTRY_KEY, {})
    for module in modules:
        if module.name in registered:
            raise ValueError(f"Module '{module.name}' is registered twice")
        app.register_blueprint(module.load_blueprint(), url_prefix=module.url_prefix)
        registered[module.name] = module.url_prefix
        app.logger.debug("Registered module %s at %s", module.name, module.url_prefix or "/")
    return registered


def register_default_modules(app: Flask) -> None:
    register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Sequence[ModuleDefinition] = (
    ModuleDefinition("auth"),
    ModuleDefinition("pages"),
    ModuleDefinition("words", url_prefix="/api"),
    ModuleDefinition("progress", url_prefix="/api/progress"),
    ModuleDefinition("settings", url_prefix="/api/settings"),
    ModuleDefinition("library", url_prefix="/api/library"),
    ModuleDefinition("vocabulary", url_prefix="/api"),
    ModuleDefinition("ai_services", url_prefix="/api/ai"),
)

"""Declarative registration of the app's feature modules.

A feature module is a package exposing a ``blueprint`` and, optionally, a
``module_metadata`` dict. Modules whose metadata says ``enabled: False`` are
skipped so a feature can be switched off without touching the factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """Where a feature module lives and where its routes are mounted."""

    import_path: str
    attribute: str = "blueprint"
    url_prefix: Optional[str] = None
    version: str = "1.0"

    def load_module(self):
        return import_string(self.import_path)

    def load_blueprint(self, module=None) -> Blueprint:
        module = module or self.load_module()
        blueprint = getattr(module, self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Expected attribute '%s' in '%s' to be a Flask Blueprint, got %r instead"
                % (self.attribute, self.import_path, type(blueprint))
            )
        return blueprint


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> List[str]:
    """Register every enabled module; returns the import paths registered."""

    registered = []
    for definition in modules:
        module = definition.load_module()
        metadata = getattr(module, "module_metadata", {}) or {}
        if not metadata.get("enabled", True):
            app.logger.info("Module %s is disabled, skipping", definition.import_path)
            continue

        url_prefix = definition.url_prefix or metadata.get("url_prefix")
        app.register_blueprint(definition.load_blueprint(module), url_prefix=url_prefix)
        registered.append(definition.import_path)
        app.logger.debug(
            "Registered module %s (version %s) at prefix %s",
            definition.import_path,
            definition.version,
            url_prefix or "<root>",
        )
    return registered


def register_default_modules(app: Flask) -> List[str]:
    return register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Iterable[ModuleDefinition] = (
    ModuleDefinition("quizwhiz_app.modules.quiz", url_prefix="/quiz", version="1.0"),
)

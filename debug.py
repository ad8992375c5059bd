# debug.py
from __future__ import annotations
import logging
from collections.abc import Iterable
from typing import Dict

LOGGER_NAME = "enigma"

COMPONENTS = (
    "plugboard",
    "rotor",
    "reflector",
    "stepping",
    "encipher",
    "config",
)


class Debug:
    """Per-machine diagnostic sink.

    Messages go to the ``enigma`` logger at DEBUG level, tagged with the
    component that produced them.  A sink starts silent; the root handler
    (stderr, plus LOG_TO when given) is installed the first time any sink
    is switched on.
    """

    _root_configured: bool = False          # once per process

    def __init__(self, *, enabled: bool = False, log_to: str | None = None) -> None:
        self.logger = logging.getLogger(LOGGER_NAME)
        self.log_to = log_to
        self.enabled = False
        self.components: Dict[str, bool] = dict.fromkeys(COMPONENTS, False)
        self.toggle_global(enabled)

    @classmethod
    def _install_handlers(cls, log_to: str | None) -> None:
        if cls._root_configured:
            return
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_to:
            handlers.append(logging.FileHandler(log_to, encoding="utf-8"))
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )
        cls._root_configured = True

    # ── emitting ─────────────────────────────────────────────────
    def active(self, component: str) -> bool:
        return self.enabled and self.components.get(component, False)

    def log(self, component: str, message: str) -> None:
        if self.active(component):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── switches ─────────────────────────────────────────────────
    def _switch(self, components: Iterable[str], state: bool | None) -> None:
        for c in components:
            if c not in self.components:
                raise ValueError(f"No such component: {c!r}")
            self.components[c] = (not self.components[c]) if state is None else state

    def enable(self, *components: str) -> None:
        self._switch(components, True)

    def disable(self, *components: str) -> None:
        self._switch(components, False)

    def toggle(self, component: str) -> None:
        self._switch((component,), None)

    def toggle_global(self, state: bool) -> None:
        if state:
            Debug._install_handlers(self.log_to)
        self.enabled = state

    def status(self) -> Dict[str, bool]:
        return dict(self.components)

    def __repr__(self) -> str:
        on = ",".join(c for c, flag in self.components.items() if flag) or "-"
        return f"<Debug {'on' if self.enabled else 'off'} [{on}]>"

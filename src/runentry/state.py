"""Active run configuration state machine."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Sequence

from runentry.config import ConfigStore
from runentry.models import CURRENT_FILE_CONFIG, RunConfig

logger = py_logging.getLogger(__name__)

ActiveListener = Callable[[RunConfig], None]


class ActiveConfiguration:
    """Holds the single selected configuration.

    Named configurations must stay present in the store; ``on_store_changed``
    resets to the current-file sentinel when the selected name disappears.
    """

    def __init__(self, initial: RunConfig = CURRENT_FILE_CONFIG) -> None:
        self._current = initial
        self._listeners: list[ActiveListener] = []

    @property
    def current(self) -> RunConfig:
        return self._current

    def snapshot(self) -> RunConfig:
        return self._current

    def subscribe(self, listener: ActiveListener) -> None:
        self._listeners.append(listener)

    def select(self, config: RunConfig) -> None:
        changed = config != self._current
        self._current = config
        if changed:
            logger.info("Active configuration is now name=%s", config.name)
            self._notify()

    def add(self, config: RunConfig, store: ConfigStore) -> None:
        store.append(config)
        self.select(config)

    def on_store_changed(self, configs: Sequence[RunConfig]) -> None:
        if self._current.is_current_file:
            return
        name = self._current.name
        if any(item.name == name for item in configs):
            return
        logger.info("Active configuration name=%s was removed; using current file", name)
        self._current = CURRENT_FILE_CONFIG
        self._notify()

    def bind(self, store: ConfigStore) -> None:
        store.subscribe(self.on_store_changed)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)

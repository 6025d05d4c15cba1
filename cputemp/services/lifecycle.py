from __future__ import annotations

import logging
from threading import Lock

from ..domain.errors import BindError, InitError, NotBound
from ..sensors.base import SensorLibrary

logger = logging.getLogger(__name__)


class SensorLifecycle:
    """
    Owns bind -> init -> cleanup of the sensors library.

    Constructed once when monitoring starts and torn down once at shutdown.
    Expected to be driven from a single owner thread; the lock only keeps a
    stray second caller from interleaving transitions.
    """

    def __init__(self, library: SensorLibrary) -> None:
        self._library = library
        self._lock = Lock()
        self._initialized = False

    @property
    def library(self) -> SensorLibrary:
        return self._library

    @property
    def bound(self) -> bool:
        return self._library.bound

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        with self._lock:
            if not self._library.bound:
                try:
                    self._library.bind()
                except BindError as e:
                    logger.warning("Sensors library unavailable (%s mode): %s", self._library.mode, e)
                    raise
            self._init_locked()

    def cleanup(self) -> None:
        with self._lock:
            if self._library.bound:
                self._library.cleanup()
                self._library.release()
            self._initialized = False

    def reload(self) -> None:
        with self._lock:
            if not self._library.bound:
                raise NotBound()
            if self._initialized:
                self._library.cleanup()
                self._initialized = False
            self._init_locked()

    def _init_locked(self) -> None:
        if self._initialized:
            # Drop the previous config so init does not stack state
            self._library.cleanup()
            self._initialized = False
        status = self._library.init()
        if status != 0:
            logger.error("sensors_init failed (status=%s)", status)
            raise InitError(status)
        self._initialized = True
        logger.info("Sensors library initialized (%s mode)", self._library.mode)

"""Explicitly initialized handles for lazily imported decoding libraries."""
from __future__ import annotations

import asyncio
import importlib
import threading
from enum import Enum
from types import ModuleType
from typing import Optional

from comparison.errors import DependencyNotReady, DependencyUnavailable
from utils.logging import logger


class CapabilityState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class Capability:
    """
    Readiness handle for one locally installed decoding library.

    The backing module is imported on :meth:`initialize`, never at
    construction, and only from the local environment.
    """

    def __init__(self, name: str, module_name: str, install_hint: str | None = None):
        self.name = name
        self.module_name = module_name
        self.install_hint = install_hint
        self._state = CapabilityState.UNINITIALIZED
        self._module: Optional[ModuleType] = None
        self._error: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> CapabilityState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_ready(self) -> bool:
        return self._state == CapabilityState.READY

    def initialize(self) -> CapabilityState:
        """Import the backing module; idempotent once READY or FAILED."""
        with self._lock:
            if self._state in (CapabilityState.READY, CapabilityState.FAILED):
                return self._state
            self._state = CapabilityState.LOADING
        logger.info("Initializing %s capability (%s)", self.name, self.module_name)
        try:
            module = importlib.import_module(self.module_name)
        except ImportError as exc:
            message = f"{self.name} is unavailable: {exc}"
            if self.install_hint:
                message = f"{message}. {self.install_hint}"
            with self._lock:
                self._error = message
                self._state = CapabilityState.FAILED
            logger.error("%s", message)
            return self._state
        with self._lock:
            self._module = module
            self._state = CapabilityState.READY
        logger.info("%s capability ready", self.name)
        return self._state

    async def initialize_async(self) -> CapabilityState:
        """Run :meth:`initialize` off the event loop."""
        return await asyncio.to_thread(self.initialize)

    def require(self) -> ModuleType:
        """Return the loaded module or raise the matching readiness error."""
        if self._state == CapabilityState.READY and self._module is not None:
            return self._module
        if self._state == CapabilityState.FAILED:
            raise DependencyUnavailable(self._error or f"{self.name} failed to initialize")
        raise DependencyNotReady(f"{self.name} is still loading, please wait a moment and try again")

    def mark_ready(self, module: ModuleType) -> None:
        """Install an already imported module, e.g. a test double."""
        with self._lock:
            self._module = module
            self._error = None
            self._state = CapabilityState.READY

    def mark_failed(self, reason: str) -> None:
        with self._lock:
            self._module = None
            self._error = reason
            self._state = CapabilityState.FAILED

    def __repr__(self) -> str:
        return f"Capability(name={self.name!r}, state={self._state.value})"

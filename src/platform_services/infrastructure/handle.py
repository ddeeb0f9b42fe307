"""
Adapter handles.

A handle is the factory's cache entry for one platform: the adapter
instance, the configuration it was built with, and the state of its
asynchronous initialization.

States:
    constructed -> initializing -> ready
                                -> failed

A failed handle stays failed; replacing it is the factory's job.
"""

import asyncio
from enum import Enum
from typing import Any

from loguru import logger

from platform_services.domain.models import Platform
from platform_services.domain.services.platform_adapter import PlatformAdapter


class AdapterState(str, Enum):
    CONSTRUCTED = "constructed"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class AdapterHandle:
    """
    Cached adapter plus its initialization state.

    ``start()`` schedules initialization in the background when an event
    loop is running and returns immediately. ``wait_ready()`` lets callers
    opt into waiting for the outcome.
    """

    def __init__(
        self,
        platform: Platform,
        instance: PlatformAdapter,
        config: dict[str, Any] | None = None,
    ):
        self.platform = platform
        self.instance = instance
        self.config: dict[str, Any] = dict(config or {})
        self.state = (
            AdapterState.READY if instance.is_initialized() else AdapterState.CONSTRUCTED
        )
        self._task: asyncio.Task[bool] | None = None

    @classmethod
    def wrap(cls, adapter: "PlatformAdapter | AdapterHandle") -> "AdapterHandle":
        """Return ``adapter`` as a handle, wrapping bare adapters."""
        if isinstance(adapter, AdapterHandle):
            return adapter
        return cls(adapter.platform, adapter)

    @property
    def initialized(self) -> bool:
        return self.state is AdapterState.READY

    @property
    def attempted(self) -> bool:
        """True once initialization has finished, successfully or not."""
        return self.state in (AdapterState.READY, AdapterState.FAILED)

    async def _initialize(self) -> bool:
        try:
            result = await self.instance.initialize(self.config)
        except asyncio.CancelledError:
            self.state = AdapterState.FAILED
            raise
        except Exception as e:
            self.state = AdapterState.FAILED
            logger.error(f"Failed to initialize {self.platform.value} adapter: {e}")
            return False

        if result:
            self.state = AdapterState.READY
            logger.info(f"Initialized {self.platform.value} adapter")
        else:
            self.state = AdapterState.FAILED
            logger.warning(
                f"{self.platform.value} adapter reported unsuccessful initialization"
            )
        return bool(result)

    def start(self) -> "asyncio.Task[bool] | None":
        """
        Begin initialization without waiting for it.

        Returns:
            The pending task, or None if initialization already finished or
            no event loop is running (it then starts on ``wait_ready()``)
        """
        if self.attempted:
            return None
        if self._task is not None:
            return self._task

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(
                f"No running loop; {self.platform.value} adapter initializes on first use"
            )
            return None

        self.state = AdapterState.INITIALIZING
        self._task = loop.create_task(self._initialize())
        return self._task

    async def wait_ready(self, timeout: float | None = None) -> bool:
        """
        Wait for initialization to finish, starting it if needed.

        Args:
            timeout: Seconds to wait; the initialization keeps running in the
                background if the wait times out

        Returns:
            True if the adapter is initialized
        """
        if self.attempted:
            return self.initialized

        task = self.start()
        if task is None:
            return self.initialized

        await asyncio.wait({task}, timeout=timeout)
        return self.initialized

    def cancel(self) -> None:
        """Cancel a pending initialization."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def __repr__(self) -> str:
        return f"AdapterHandle(platform={self.platform.value}, state={self.state.value})"

"""Host interface consumed by the plugin, plus an in-process host.

:class:`PluginHost` is the only view the plugin has of the surrounding
application: the batch being processed, settings storage, a logger, the
notification bus and the registry.  Any object with these members works;
:class:`LocalHost` is a complete implementation used for standalone runs and
tests.

Usage::

    import asyncio
    from imge_uploader import ImageRecord, LocalHost, register

    host = LocalHost(settings={"picBed.picgo-plugin-im.ge-uploader": {"apiKey": "..."}})
    register(host)
    images = [ImageRecord(buffer=data, file_name="cat.png", extension="png")]
    ok = asyncio.run(host.run(images))
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, Union, runtime_checkable

from imge_uploader.config import ConfigField
from imge_uploader.models import ImageRecord, LifecycleStage
from imge_uploader.observability import get_logger

StageHandler = Callable[["PluginHost"], Awaitable[bool]]
"""Upload and post-processing stage: ``await handle(host) -> bool``."""

HookHandler = Callable[["PluginHost"], Union[Awaitable[Any], Any]]
"""Transformer or lifecycle hook; may be sync or async, result ignored."""


@dataclass(frozen=True)
class UploaderSpec:
    """Registration payload for an uploader."""

    name: str
    handle: StageHandler
    config: Callable[[], list[ConfigField]]


@dataclass(frozen=True)
class Notification:
    title: str
    body: str


@runtime_checkable
class PluginHost(Protocol):
    """Everything the plugin needs from the host application."""

    output: list[ImageRecord]
    log: logging.Logger

    def get_config(self, key: str) -> Any | None:
        """Return the stored settings under *key*, or ``None``."""
        ...

    def notify(self, title: str, body: str) -> None:
        """Show a user-facing notification."""
        ...

    def register_uploader(self, name: str, spec: UploaderSpec) -> None:
        ...

    def register_transformer(self, name: str, handle: HookHandler) -> None:
        ...

    def register_lifecycle_hook(
        self,
        stage: LifecycleStage,
        name: str,
        handle: HookHandler,
    ) -> None:
        ...


async def _maybe_await(result: Any) -> Any:
    if isinstance(result, Awaitable):
        return await result
    return result


@dataclass
class LocalHost:
    """In-process :class:`PluginHost` backed by plain Python objects.

    Parameters
    ----------
    settings:
        Settings store read by :meth:`get_config`.
    log:
        Logger handed to the plugin.  Defaults to the structured
        ``imge_uploader.host`` logger.
    """

    settings: dict[str, Any] = field(default_factory=dict)
    log: logging.Logger = field(default_factory=lambda: get_logger("imge_uploader.host"))
    output: list[ImageRecord] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    uploaders: dict[str, UploaderSpec] = field(default_factory=dict)
    transformers: dict[str, HookHandler] = field(default_factory=dict)
    hooks: dict[LifecycleStage, dict[str, HookHandler]] = field(
        default_factory=lambda: {stage: {} for stage in LifecycleStage},
    )

    # -- PluginHost --------------------------------------------------------

    def get_config(self, key: str) -> Any | None:
        return self.settings.get(key)

    def notify(self, title: str, body: str) -> None:
        self.notifications.append(Notification(title=title, body=body))

    def register_uploader(self, name: str, spec: UploaderSpec) -> None:
        self.uploaders[name] = spec

    def register_transformer(self, name: str, handle: HookHandler) -> None:
        self.transformers[name] = handle

    def register_lifecycle_hook(
        self,
        stage: LifecycleStage,
        name: str,
        handle: HookHandler,
    ) -> None:
        self.hooks[LifecycleStage(stage)][name] = handle

    # -- batch driver ------------------------------------------------------

    async def _run_hooks(self, stage: LifecycleStage) -> None:
        for handle in self.hooks[stage].values():
            await _maybe_await(handle(self))

    async def run(self, images: list[ImageRecord], uploader: str | None = None) -> bool:
        """Push *images* through every registered stage.

        Order: ``before_transform`` hooks, transformers, ``before_upload``
        hooks, the uploader, then ``after_upload`` hooks (only when the
        upload succeeded).  Returns the uploader's result.

        Raises
        ------
        LookupError
            If no uploader (or not the named one) is registered.
        """
        if uploader is None:
            if not self.uploaders:
                raise LookupError("no uploader registered")
            spec = next(iter(self.uploaders.values()))
        else:
            spec = self.uploaders[uploader]

        self.output = images
        await self._run_hooks(LifecycleStage.BEFORE_TRANSFORM)
        for handle in self.transformers.values():
            await _maybe_await(handle(self))
        await self._run_hooks(LifecycleStage.BEFORE_UPLOAD)

        ok = await spec.handle(self)
        if ok:
            await self._run_hooks(LifecycleStage.AFTER_UPLOAD)
        return ok

"""Registration glue between the host registry and the pipeline stages."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from imge_uploader.config import CONFIG_NAME, config_schema
from imge_uploader.host import PluginHost, UploaderSpec
from imge_uploader.models import LifecycleStage
from imge_uploader.postprocess import handle_after_upload
from imge_uploader.uploader import handle_upload

UPLOADER_DISPLAY_NAME = "IM.GE图床"


def handle_transform(ctx: PluginHost) -> None:
    """No-op transformer: images are already in memory, only log them."""
    for image in ctx.output:
        ctx.log.debug("处理图片", extra={"extra_fields": {"file_name": image.file_name}})


def _log_stage(stage: LifecycleStage) -> Callable[[PluginHost], None]:
    def handle(ctx: PluginHost) -> None:
        ctx.log.debug(
            "lifecycle hook",
            extra={"extra_fields": {"stage": stage.value, "images": len(ctx.output)}},
        )

    return handle


def register(host: PluginHost) -> None:
    """Register the uploader, transformer and lifecycle hooks with *host*."""
    host.register_uploader(
        CONFIG_NAME,
        UploaderSpec(
            name=UPLOADER_DISPLAY_NAME,
            handle=handle_upload,
            config=config_schema,
        ),
    )
    host.register_transformer(CONFIG_NAME, handle_transform)
    host.register_lifecycle_hook(
        LifecycleStage.BEFORE_TRANSFORM,
        CONFIG_NAME,
        _log_stage(LifecycleStage.BEFORE_TRANSFORM),
    )
    host.register_lifecycle_hook(
        LifecycleStage.BEFORE_UPLOAD,
        CONFIG_NAME,
        _log_stage(LifecycleStage.BEFORE_UPLOAD),
    )
    host.register_lifecycle_hook(
        LifecycleStage.AFTER_UPLOAD,
        CONFIG_NAME,
        handle_after_upload,
    )


@dataclass(frozen=True)
class PluginManifest:
    """What the host loads: registered names plus the ``register`` entry."""

    uploader: str
    transformer: str
    register: Callable[[PluginHost], None]


def plugin() -> PluginManifest:
    return PluginManifest(
        uploader=CONFIG_NAME,
        transformer=CONFIG_NAME,
        register=register,
    )

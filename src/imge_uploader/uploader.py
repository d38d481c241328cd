"""Upload stage: size gate, multipart upload, response interpretation.

Images are uploaded strictly one after another.  The first failure aborts
the batch: images already uploaded keep their annotations, later images are
never attempted.  :func:`handle_upload` is the batch boundary that turns
every error into a notification and a ``False`` result.
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Any

from imge_uploader.config import ImgeConfig, load_config
from imge_uploader.errors import RemoteUploadError, SizeLimitError
from imge_uploader.host import PluginHost
from imge_uploader.models import ImageRecord
from imge_uploader.transport import ImgeTransport

NOTIFICATION_TITLE = "IM.GE图床错误"
UNKNOWN_ERROR = "未知错误"
DEFAULT_CONTENT_TYPE = "image/jpeg"

# Formats im.ge accepts that older ``mimetypes`` tables do not know.
_EXTRA_IMAGE_TYPES: dict[str, str] = {
    "webp": "image/webp",
    "avif": "image/avif",
    "heic": "image/heic",
}


def content_type_for(extension: str | None) -> str:
    """Map a file extension (``"png"``, ``".PNG"``) to an image MIME type.

    Non-image or unknown extensions fall back to ``image/jpeg``.
    """
    if not extension:
        return DEFAULT_CONTENT_TYPE
    ext = extension.lstrip(".").lower()
    if not ext:
        return DEFAULT_CONTENT_TYPE
    mime_type, _ = mimetypes.guess_type(f"x.{ext}", strict=False)
    if mime_type is None:
        mime_type = _EXTRA_IMAGE_TYPES.get(ext)
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return DEFAULT_CONTENT_TYPE


def _format_mb(value: float) -> str:
    return f"{value:g}"


def check_size(image: ImageRecord, config: ImgeConfig) -> None:
    """Raise :class:`SizeLimitError` if *image* is over the configured limit."""
    size_mb = image.size_mb
    if size_mb > config.image_max_size:
        raise SizeLimitError(
            message=(
                f"图片 {image.file_name} 大小 {size_mb:.2f}MB "
                f"超过限制 {_format_mb(config.image_max_size)}MB"
            ),
            context={
                "file_name": image.file_name,
                "size_mb": size_mb,
                "max_size_mb": config.image_max_size,
            },
        )


def _interpret(image: ImageRecord, response: dict[str, Any]) -> str:
    """Return the hosted URL from *response* or raise RemoteUploadError."""
    status_code = response.get("status_code")
    status_txt = response.get("status_txt")
    if status_code != 200:
        raise RemoteUploadError(
            message=f"上传失败: {status_txt}",
            context={
                "file_name": image.file_name,
                "status_code": status_code,
                "status_txt": status_txt,
            },
        )

    image_info = response.get("image")
    url = image_info.get("url") if isinstance(image_info, dict) else None
    if not isinstance(url, str) or not url:
        raise RemoteUploadError(
            message="上传失败: response did not include image.url",
            context={
                "file_name": image.file_name,
                "status_code": status_code,
                "status_txt": status_txt,
            },
        )
    return url


async def upload_images(
    images: list[ImageRecord],
    config: ImgeConfig,
    transport: ImgeTransport,
    log: logging.Logger,
) -> None:
    """Upload *images* in order, annotating each one in place.

    Raises
    ------
    SizeLimitError
        Before contacting im.ge for an oversized image.
    RemoteUploadError
        When im.ge reports a non-200 ``status_code``.
    TransportError
        When the request fails at the network level.
    """
    for image in images:
        check_size(image, config)

        log.info(
            "upload",
            extra={
                "extra_fields": {
                    "file_name": image.file_name,
                    "extension": image.extension,
                    "size_bytes": image.size_bytes,
                }
            },
        )
        response = await transport.upload(
            image.file_name,
            image.buffer,
            content_type_for(image.extension),
        )
        log.info(
            "IM.GE图床上传响应",
            extra={"extra_fields": {"file_name": image.file_name, "response": response}},
        )

        image.img_url = _interpret(image, response)
        image.full_result = response


async def handle_upload(ctx: PluginHost, transport: ImgeTransport | None = None) -> bool:
    """Uploader entry point registered with the host.

    Returns ``True`` when every image in ``ctx.output`` was uploaded.  On
    any failure the error is logged, reported through ``ctx.notify`` and
    ``False`` is returned; nothing is raised to the host.
    """
    owned: ImgeTransport | None = None
    try:
        config = load_config(ctx)
        if transport is None:
            transport = owned = ImgeTransport(config)
        await upload_images(ctx.output, config, transport, ctx.log)
        return True
    except Exception as exc:
        message = getattr(exc, "message", None) or str(exc) or UNKNOWN_ERROR
        ctx.log.error(
            "IM.GE图床上传失败",
            exc_info=exc,
            extra={
                "extra_fields": {
                    "error": type(exc).__name__,
                    "error_code": getattr(exc, "code", None),
                    "context": getattr(exc, "context", None),
                }
            },
        )
        ctx.notify(NOTIFICATION_TITLE, message)
        return False
    finally:
        if owned is not None:
            await owned.close()

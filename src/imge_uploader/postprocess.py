"""After-upload stage: turn hosted URLs into Markdown image references.

This stage is cosmetic.  It never touches the network, never re-checks size
or credentials, and never fails the batch: errors are logged and the stage
still reports ``True``.
"""

from __future__ import annotations

import logging

from imge_uploader.host import PluginHost
from imge_uploader.models import ImageRecord


def render_display_text(url: str) -> str:
    """Return ``![](url)`` with parentheses percent-encoded.

    Encoding ``(`` and ``)`` keeps the reference parseable; applying this to
    the same URL always gives the same string.
    """
    escaped_url = url.replace("(", "%28").replace(")", "%29")
    return f"![]({escaped_url})"


def apply_display_text(images: list[ImageRecord], log: logging.Logger) -> int:
    """Set ``display_text`` on every image that has an ``img_url``.

    Returns the number of images updated; images without a URL are skipped.
    """
    updated = 0
    for image in images:
        if not image.img_url:
            continue
        image.display_text = render_display_text(image.img_url)
        updated += 1
        log.info(
            "display text applied",
            extra={"extra_fields": {"file_name": image.file_name, "img_url": image.img_url}},
        )
    return updated


async def handle_after_upload(ctx: PluginHost) -> bool:
    """After-upload hook registered with the host.  Always returns ``True``."""
    try:
        ctx.log.info("IM.GE图床上传完成")
        apply_display_text(ctx.output, ctx.log)
    except Exception as exc:
        ctx.log.error("上传后处理失败", exc_info=exc)
    return True

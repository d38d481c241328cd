"""imge_uploader — upload images to im.ge from an image-management host.

Public re-exports
-----------------

* **Registration:** :func:`register`, :func:`plugin`
* **Stages:** :func:`handle_upload`, :func:`handle_after_upload`
* **Configuration:** :class:`ImgeConfig`, :func:`resolve_config`,
  :func:`config_schema`
* **Host:** :class:`PluginHost`, :class:`LocalHost`
* **Errors:** Every :class:`ImgeError` subclass and :class:`ErrorCode`

Usage::

    import asyncio
    from imge_uploader import ImageRecord, LocalHost, register

    host = LocalHost(settings={"picBed.picgo-plugin-im.ge-uploader": {"apiKey": "..."}})
    register(host)
    ok = asyncio.run(host.run([ImageRecord(buffer=data, file_name="cat.png", extension="png")]))
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from imge_uploader.config import (
    CONFIG_NAME,
    SETTINGS_KEY,
    ConfigField,
    ImgeConfig,
    config_schema,
    load_config,
    resolve_config,
)

# ── Errors ──────────────────────────────────────────────────────────────
from imge_uploader.errors import (
    ConfigurationError,
    ErrorCode,
    ImgeError,
    RemoteUploadError,
    SizeLimitError,
    TransportError,
)

# ── Host ────────────────────────────────────────────────────────────────
from imge_uploader.host import LocalHost, Notification, PluginHost, UploaderSpec

# ── Models ──────────────────────────────────────────────────────────────
from imge_uploader.models import ImageRecord, LifecycleStage

# ── Pipeline ────────────────────────────────────────────────────────────
from imge_uploader.plugin import PluginManifest, plugin, register
from imge_uploader.postprocess import handle_after_upload, render_display_text
from imge_uploader.transport import ImgeTransport
from imge_uploader.uploader import handle_upload

__all__ = [
    "CONFIG_NAME",
    "SETTINGS_KEY",
    "ConfigField",
    "ConfigurationError",
    "ErrorCode",
    "ImageRecord",
    "ImgeConfig",
    "ImgeError",
    "ImgeTransport",
    "LifecycleStage",
    "LocalHost",
    "Notification",
    "PluginHost",
    "PluginManifest",
    "RemoteUploadError",
    "SizeLimitError",
    "TransportError",
    "UploaderSpec",
    "config_schema",
    "handle_after_upload",
    "handle_upload",
    "load_config",
    "plugin",
    "register",
    "render_display_text",
    "resolve_config",
]

__version__ = "0.1.0"

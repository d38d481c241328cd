"""Plugin configuration for the im.ge uploader.

The host stores settings as a loose key-value mapping under
``picBed.<CONFIG_NAME>`` (keys use the host's camelCase spelling).
:func:`resolve_config` turns that mapping into an immutable
:class:`ImgeConfig` once per batch, and :func:`config_schema` describes the
same settings to the host's settings UI.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from imge_uploader.errors import ConfigurationError

if TYPE_CHECKING:
    from imge_uploader.host import PluginHost

CONFIG_NAME = "picgo-plugin-im.ge-uploader"
"""Identifier under which the uploader, transformer and hooks register."""

SETTINGS_KEY = f"picBed.{CONFIG_NAME}"
"""Host settings key holding the raw configuration mapping."""

DEFAULT_ENDPOINT = "https://im.ge/api/1/upload"

DEFAULT_IMAGE_MAX_SIZE = 5.0


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigField:
    """One field of the settings form rendered by the host."""

    name: str
    type: str
    message: str
    required: bool
    default: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the plain-dict shape the host's settings UI consumes."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "message": self.message,
            "required": self.required,
        }
        if self.default is not None:
            data["default"] = self.default
        return data


def config_schema() -> list[ConfigField]:
    """Return the settings fields exposed to the host UI."""
    return [
        ConfigField(
            name="apiKey",
            type="input",
            message="IM.GE API Key",
            required=True,
        ),
        ConfigField(
            name="imageMaxSize",
            type="input",
            message="图片大小限制（MB）",
            required=False,
            default="5",
        ),
    ]


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImgeConfig:
    """Validated configuration for one upload batch.

    Parameters
    ----------
    api_key:
        im.ge API key sent as ``X-API-Key``.  **Required.**  Never logged.
    image_max_size:
        Largest accepted image, in megabytes (1 MB = 1 048 576 bytes).
    endpoint:
        Upload URL.  Override for proxy or testing environments.
    timeout_seconds:
        HTTP timeout for a single upload request.
    """

    api_key: str

    image_max_size: float = DEFAULT_IMAGE_MAX_SIZE

    endpoint: str = DEFAULT_ENDPOINT

    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        from urllib.parse import urlparse

        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "未获取到IM.GE图床配置: apiKey is required",
                context={"field": "apiKey"},
            )
        if isinstance(self.image_max_size, bool) or not isinstance(
            self.image_max_size, (int, float)
        ):
            raise ConfigurationError(
                f"imageMaxSize must be a number, got {self.image_max_size!r}",
                context={"field": "imageMaxSize", "value": self.image_max_size},
            )
        if not math.isfinite(self.image_max_size):
            raise ConfigurationError(
                f"imageMaxSize must be a finite number, got {self.image_max_size}",
                context={"field": "imageMaxSize", "value": self.image_max_size},
            )
        if self.image_max_size <= 0:
            raise ConfigurationError(
                f"imageMaxSize must be > 0, got {self.image_max_size}",
                context={"field": "imageMaxSize", "value": self.image_max_size},
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                context={"field": "timeout_seconds", "value": self.timeout_seconds},
            )

        parsed = urlparse(self.endpoint)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ConfigurationError(
                f"endpoint uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API key.",
                context={"field": "endpoint", "value": self.endpoint},
            )

    def __repr__(self) -> str:
        """Mask the API key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_key":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"api_key='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ImgeConfig({', '.join(parts)})"


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def _parse_max_size(value: Any) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_IMAGE_MAX_SIZE
    if isinstance(value, bool):
        raise ConfigurationError(
            f"imageMaxSize must be a number, got {value!r}",
            context={"field": "imageMaxSize", "value": value},
        )
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"imageMaxSize must be a number, got {value!r}",
            context={"field": "imageMaxSize", "value": value},
            cause=exc,
        ) from exc


def resolve_config(raw: Mapping[str, Any] | None) -> ImgeConfig:
    """Validate raw host settings and fill in defaults.

    Raises
    ------
    ConfigurationError
        If *raw* is missing, ``apiKey`` is absent or blank, or
        ``imageMaxSize`` is not a positive number.
    """
    if not raw:
        raise ConfigurationError(
            "未获取到IM.GE图床配置",
            context={"field": SETTINGS_KEY},
        )

    api_key = raw.get("apiKey")
    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigurationError(
            "未获取到IM.GE图床配置: apiKey is required",
            context={"field": "apiKey"},
        )

    return ImgeConfig(
        api_key=api_key.strip(),
        image_max_size=_parse_max_size(raw.get("imageMaxSize")),
    )


def load_config(host: PluginHost) -> ImgeConfig:
    """Read this plugin's settings from *host* and resolve them."""
    return resolve_config(host.get_config(SETTINGS_KEY))

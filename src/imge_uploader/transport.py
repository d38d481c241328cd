"""Async HTTP transport for the im.ge upload API.

A single request lifecycle:

1. Build the multipart body (``source`` file part plus ``format=json``).
2. ``POST`` it with the ``X-API-Key`` header.
3. Decode the JSON body and hand it back untouched.

There is exactly one attempt per image.  Network failures become
:class:`TransportError`; an undecodable body becomes
:class:`RemoteUploadError`.  Interpreting ``status_code`` inside the body is
left to the caller.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from imge_uploader.config import ImgeConfig
from imge_uploader.errors import RemoteUploadError, TransportError
from imge_uploader.observability import get_logger
from imge_uploader.utils.redact import redact

log = get_logger("imge_uploader.transport")


def _decode_body(response: httpx.Response, file_name: str) -> dict[str, Any]:
    """Return the JSON object in *response* or raise RemoteUploadError."""
    try:
        body = response.json()
    except (ValueError, UnicodeDecodeError) as exc:
        raise RemoteUploadError(
            message=f"上传失败: HTTP {response.status_code} {response.reason_phrase}".rstrip(),
            context={
                "file_name": file_name,
                "http_status": response.status_code,
                "body": response.text[:500],
            },
            cause=exc,
        ) from exc
    if not isinstance(body, dict):
        raise RemoteUploadError(
            message=f"上传失败: unexpected response from im.ge (HTTP {response.status_code})",
            context={"file_name": file_name, "http_status": response.status_code},
        )
    return body


class ImgeTransport:
    """Async im.ge client with API-key auth and a single attempt per upload.

    Parameters
    ----------
    config:
        Resolved configuration supplying the key, endpoint and timeout.
    client:
        Optional pre-built :class:`httpx.AsyncClient`.  When given, the
        caller owns it and :meth:`close` leaves it open.
    """

    def __init__(
        self,
        config: ImgeConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    async def upload(
        self,
        file_name: str,
        data: bytes,
        content_type: str,
    ) -> dict[str, Any]:
        """Upload one image and return the decoded response body.

        Raises
        ------
        TransportError
            On timeouts and connection-level failures.
        RemoteUploadError
            When the body is not a JSON object.
        """
        url = self._config.endpoint
        headers = {"X-API-Key": self._config.api_key}
        files = {"source": (file_name, data, content_type)}
        form = {"format": "json"}

        log.debug(
            "POST upload",
            extra={
                "extra_fields": redact(
                    {"url": url, "headers": headers, "files": files, "data": form},
                    self._config.api_key,
                )
            },
        )

        t0 = time.monotonic()
        try:
            response = await self._client.post(
                url, headers=headers, files=files, data=form,
            )
        except httpx.HTTPError as exc:
            raise TransportError(
                message=f"上传失败: {type(exc).__name__}: {exc}".rstrip(": "),
                context={"url": url, "file_name": file_name},
                cause=exc,
            ) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        log.debug(
            "POST upload complete",
            extra={
                "extra_fields": {
                    "url": url,
                    "http_status": response.status_code,
                    "duration_ms": round(elapsed_ms, 1),
                }
            },
        )
        return _decode_body(response, file_name)

    async def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ImgeTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


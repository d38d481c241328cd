"""Tests for the error hierarchy in imge_uploader/errors.py."""

from __future__ import annotations

import pytest

from imge_uploader.errors import (
    ConfigurationError,
    ErrorCode,
    ImgeError,
    RemoteUploadError,
    SizeLimitError,
    TransportError,
)


@pytest.mark.parametrize(
    "cls, code",
    [
        (ConfigurationError, ErrorCode.CONFIGURATION_ERROR),
        (SizeLimitError, ErrorCode.SIZE_LIMIT_ERROR),
        (RemoteUploadError, ErrorCode.REMOTE_UPLOAD_ERROR),
        (TransportError, ErrorCode.TRANSPORT_ERROR),
    ],
)
def test_subclass_codes(cls, code):
    err = cls("boom")
    assert isinstance(err, ImgeError)
    assert err.code == code
    assert err.message == "boom"
    assert str(err) == "boom"
    assert err.context == {}


def test_cause_is_chained():
    cause = OSError("reset")
    err = TransportError("failed", cause=cause)
    assert err.cause is cause
    assert err.__cause__ is cause


def test_repr_includes_context():
    err = RemoteUploadError("nope", context={"status_txt": "Forbidden"})
    text = repr(err)
    assert "RemoteUploadError" in text
    assert "Forbidden" in text


def test_repr_without_context():
    assert "context" not in repr(ConfigurationError("missing"))


def test_size_limit_accessors():
    err = SizeLimitError(
        "too big",
        context={"file_name": "a.png", "size_mb": 6.0, "max_size_mb": 5.0},
    )
    assert err.file_name == "a.png"
    assert err.size_mb == 6.0
    assert err.max_size_mb == 5.0


def test_remote_upload_status_txt():
    assert RemoteUploadError("x", context={"status_txt": "Forbidden"}).status_txt == "Forbidden"
    assert RemoteUploadError("x").status_txt is None


def test_error_code_is_str():
    assert ErrorCode.SIZE_LIMIT_ERROR == "SIZE_LIMIT_ERROR"

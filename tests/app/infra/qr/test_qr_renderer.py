"""Testes da renderização do QR de pareamento."""

from __future__ import annotations

import base64

import pytest

from app.infra.qr.renderer import QRRenderError, render_qr_data_uri

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_render_returns_png_data_uri() -> None:
    uri = render_qr_data_uri("2@abc,def,ghi==")

    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(PNG_MAGIC)


def test_render_is_deterministic() -> None:
    assert render_qr_data_uri("2@same") == render_qr_data_uri("2@same")


def test_empty_artifact_rejected() -> None:
    with pytest.raises(QRRenderError):
        render_qr_data_uri("")


def test_oversized_artifact_rejected() -> None:
    with pytest.raises(QRRenderError, match="QR Code Generation Error"):
        render_qr_data_uri("x" * 5000)

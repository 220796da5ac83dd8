"""Renderização de QR do artefato de pareamento."""

from app.infra.qr.renderer import QRRenderError, render_qr_data_uri

__all__ = ["QRRenderError", "render_qr_data_uri"]

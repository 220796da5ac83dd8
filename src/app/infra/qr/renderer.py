"""Renderização do artefato de pareamento como QR em PNG (data URI)."""

from __future__ import annotations

import logging

import segno

logger = logging.getLogger(__name__)

# Largura alvo da imagem em pixels
DEFAULT_QR_WIDTH = 256

# Margem (quiet zone) em módulos
DEFAULT_QR_BORDER = 1


class QRRenderError(RuntimeError):
    """Falha ao gerar a imagem do QR."""


def render_qr_data_uri(
    artifact: str,
    width: int = DEFAULT_QR_WIDTH,
    border: int = DEFAULT_QR_BORDER,
) -> str:
    """Gera `data:image/png;base64,...` para o artefato de pareamento.

    Usa correção de erro H. A escala é a maior que cabe em `width`.

    Raises:
        QRRenderError: Se o artefato não puder ser codificado.
    """
    if not artifact:
        raise QRRenderError("artefato de pareamento vazio")
    try:
        qr = segno.make(artifact, error="h", micro=False)
    except (ValueError, segno.DataOverflowError) as exc:
        logger.warning("qr_render_failed", extra={"error_type": type(exc).__name__})
        raise QRRenderError(f"QR Code Generation Error: {exc}") from exc

    modules, _ = qr.symbol_size(scale=1, border=border)
    scale = max(1, width // modules)
    return qr.png_data_uri(scale=scale, border=border)

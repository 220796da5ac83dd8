"""Normalização de endereços de destinatário."""

from __future__ import annotations

from app.constants.whatsapp import USER_ADDRESS_SUFFIX


def normalize_address(address: str, suffix: str = USER_ADDRESS_SUFFIX) -> str:
    """Normaliza o destinatário para o formato JID.

    Remove espaços e um `+` inicial; se não houver `@`, anexa o sufixo
    padrão da rede.

    Exemplo:
        normalize_address("+5491112223344") -> "5491112223344@s.whatsapp.net"

    Raises:
        ValueError: Se o endereço estiver vazio.
    """
    value = (address or "").strip()
    if value.startswith("+"):
        value = value[1:]
    if not value:
        raise ValueError("endereço de destino vazio")
    if "@" in value:
        return value
    return f"{value}{suffix}"

"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="conecta_wa")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("message_buffered", extra={"message_kind": "audio"})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime

Logs nunca carregam números de telefone completos nem conteúdo de mensagens.
"""

from config.logging.config import (
    UVICORN_LOGGERS,
    configure_logging,
    get_logger,
    mask_address,
)
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "UVICORN_LOGGERS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "mask_address",
]

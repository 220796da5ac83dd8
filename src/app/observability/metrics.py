"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente por sistemas como BigQuery, CloudWatch Insights, etc.

Métricas suportadas:
- Latência: histogram de tempos de execução por componente/operação
- Envio: counter de resultados de envio outbound (sucesso/falha + motivo)
- Fase: counter de transições de fase da conexão

Uso:
    from app.observability.metrics import record_latency, record_send_outcome

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("outbound_dispatcher", "send_text", latency_ms)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "outbound_dispatcher", "session_service")
        operation: Nome da operação (ex: "send_text", "initialize")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    extra = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)


def record_send_outcome(
    kind: str,
    success: bool,
    reason: str | None = None,
) -> None:
    """Registra o resultado de um envio outbound.

    Args:
        kind: Tipo de mensagem enviada ("text" ou "audio")
        success: Se o envio foi aceito pelo protocolo
        reason: Motivo da falha, quando houver
    """
    logger.info(
        "metric_send_outcome",
        extra={
            "metric_type": "send_outcome",
            "message_kind": kind,
            "success": success,
            "reason": reason,
        },
    )


def record_phase_change(from_phase: str, to_phase: str, trigger: str) -> None:
    """Registra transição de fase da conexão."""
    logger.info(
        "metric_phase_change",
        extra={
            "metric_type": "phase_change",
            "from_phase": from_phase,
            "to_phase": to_phase,
            "trigger": trigger,
        },
    )

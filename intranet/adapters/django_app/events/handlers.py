"""
Event Handlers e tarefas agendadas.

Handlers rodam via Celery quando Domain Events são publicados com
EVENT_PUBLISHER_MODE=celery. A varredura de escalonamento de SLA roda
pelo Celery Beat (`varredura-escalonamento-sla`) ou pelo script
scripts/run_sla_scan.py; as duas chamam `executar_varredura_sla`.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

import logging
from typing import Any, Dict

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Chamados
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_reaberto(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketReabertoEvent.

    Registra a reabertura (com o número do novo ciclo) para análise
    de retrabalho.
    """
    try:
        ticket_id = event_data.get('aggregate_id')
        dados = event_data.get('data', {})

        logger.info(
            f"[HANDLER] TicketReaberto: {ticket_id} | "
            f"de {dados.get('de')} | ciclo {dados.get('numero_ciclo')}"
        )

        record_metric.delay(
            metric_name='tickets_reopened',
            value=1,
            tags={'de': dados.get('de', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler TicketReaberto: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_resolvido(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketResolvidoEvent: métrica de cumprimento do SLA."""
    try:
        dados = event_data.get('data', {})
        violada = bool(dados.get('resolucao_violada'))

        logger.info(
            f"[HANDLER] TicketResolvido: {event_data.get('aggregate_id')} | "
            f"ciclo {dados.get('numero_ciclo')} | violada={violada}"
        )

        record_metric.delay(
            metric_name='tickets_resolved',
            value=1,
            tags={'sla': 'violado' if violada else 'cumprido'},
        )

    except Exception as e:
        logger.error(f"Erro no handler TicketResolvido: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_alerta_sla(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para AlertaSlaDisparadoEvent.

    A notificação in-app já foi gravada pela varredura; aqui só se
    registra a métrica por tipo de alerta.
    """
    try:
        dados = event_data.get('data', {})
        tipo = dados.get('tipo_alerta', '')

        logger.info(
            f"[HANDLER] AlertaSla: {event_data.get('aggregate_id')} | "
            f"{tipo} | {dados.get('destinatarios', 0)} destinatários"
        )

        record_metric.delay(metric_name='sla_alerts', value=1, tags={'tipo': tipo})

    except Exception as e:
        logger.error(f"Erro no handler AlertaSla: {e}", exc_info=True)
        raise


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados; tipos sem handler
    ficam só no Event Store.
    """
    handlers = {
        'TicketReabertoEvent': handle_ticket_reaberto,
        'TicketResolvidoEvent': handle_ticket_resolvido,
        'AlertaSlaDisparadoEvent': handle_alerta_sla,
    }

    handler = handlers.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Dict[str, str] = None
) -> None:
    """Registra métrica no log estruturado."""
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

def executar_varredura_sla() -> Dict[str, Any]:
    """
    Executa uma varredura de escalonamento de SLA.

    Ponto único usado pela task agendada e pelo script de cron.

    Returns:
        Resumo da varredura (ResultadoVarreduraDTO.to_dict())
    """
    # Importação tardia para evitar circular import
    from intranet.config.container import get_container

    servico = get_container().varredura_sla_service()
    return servico.execute().to_dict()


@shared_task(bind=True, ignore_result=True)
def varrer_sla(self) -> Dict[str, Any]:
    """
    Varredura periódica de SLA disparada pelo Celery Beat.

    Sem retry: a próxima execução agendada cobre a falha e a guarda
    de deduplicação impede alertas repetidos.
    """
    logger.info("[SCHEDULED] Iniciando varredura de SLA...")

    try:
        return executar_varredura_sla()
    except Exception as e:
        logger.error(f"Erro na varredura de SLA: {e}", exc_info=True)
        return {}

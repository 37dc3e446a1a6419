"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por publicar eventos para handlers assíncronos.
Implementações:
- LoggingEventPublisher: Loga e despacha para handlers locais (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes

O Unit of Work chama o publisher só depois do commit.
"""

from typing import Callable, Dict, List
import json
import logging

from intranet.core.shared.events import DomainEvent
from intranet.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class _HandlersLocais:
    """Registro de handlers síncronos por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def register_handler(self, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher que loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Usado em produção; falha de envio é logada e não quebra o fluxo,
    pois o evento já está no Event Store.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from intranet.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class InMemoryEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


def get_event_publisher(mode: str = 'sync') -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: 'celery' para processamento assíncrono; qualquer outro valor loga
    """
    if mode == 'celery':
        return CeleryEventPublisher()
    return LoggingEventPublisher()

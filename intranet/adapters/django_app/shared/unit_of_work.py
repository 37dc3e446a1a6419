"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Abrir/fechar um bloco `transaction.atomic()` por `with uow:`
- Commit/Rollback coordenado
- Persistir eventos no Event Store dentro da transação
- Publicar eventos só depois do commit (`transaction.on_commit`)

A mesma instância pode ser usada em vários `with` seguidos: a
varredura de SLA abre uma transação por alerta.
"""

from typing import Dict, List, Optional
import logging

from django.db import transaction

from intranet.core.shared.events import DomainEvent
from intranet.core.shared.exceptions import ConcurrencyError
from intranet.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Dentro de outra transação o bloco vira savepoint, e a publicação
    espera o commit da transação externa.

    Example:
        with DjangoUnitOfWork(event_publisher, event_store) as uow:
            repo.save(entity1)
            repo.save(entity2)
            uow.publish_event(MyEvent(...))
        # Commit + eventos gravados + publicação agendada

    Example com rollback:
        with uow:
            repo.save(entity)
            raise ValidationError("...")
        # Rollback, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
    ):
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._atomic = None

    def _begin_transaction(self) -> None:
        self.clear_events()
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Persistir eventos no Event Store (mesma transação)
        2. Agendar publicação para depois do commit
        3. Fechar o bloco atômico (commit)
        """
        if self._atomic is None:
            return

        eventos = self.collect_events()
        try:
            if self._event_store and eventos:
                self._persist_events(eventos)
            if eventos:
                transaction.on_commit(lambda: self._publish_events(eventos))
        except Exception:
            logger.exception("Falha ao gravar eventos; desfazendo transação")
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        self.clear_events()
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        transaction.set_rollback(True)
        atomic.__exit__(None, None, None)
        self.clear_events()
        logger.debug("Transaction rolled back")

    def _persist_events(self, eventos: List[DomainEvent]) -> None:
        sequencias: Dict[str, int] = {}
        for event in eventos:
            agregado = event.aggregate_id
            if agregado not in sequencias:
                sequencias[agregado] = self._event_store.ultima_sequencia(agregado)
            sequencias[agregado] += 1
            try:
                self._event_store.append(event=event, sequence=sequencias[agregado])
            except ConcurrencyError:
                # Outra transação gravou no mesmo agregado depois da leitura; uma nova tentativa
                sequencias[agregado] = self._event_store.ultima_sequencia(agregado) + 1
                logger.warning(
                    f"Sequência desatualizada para {agregado}; regravando {event.event_type} "
                    f"na sequência {sequencias[agregado]}"
                )
                self._event_store.append(event=event, sequence=sequencias[agregado])

    def _publish_events(self, eventos: List[DomainEvent]) -> None:
        """
        Publica eventos após commit bem-sucedido.

        Falha de publicação não desfaz nada: o evento já está no Event Store.
        """
        for event in eventos:
            logger.info(f"Publishing event: {event.event_type} for aggregate {event.aggregate_id}")
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes e scripts sem banco.

    Não desfaz escrita nos repositórios em memória; só controla os eventos.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self.clear_events()

    def commit(self) -> None:
        eventos = self.collect_events()
        self._committed = True
        self._published_events.extend(eventos)
        self.clear_events()
        if self._event_publisher:
            self._event_publisher.publish_batch(eventos)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()

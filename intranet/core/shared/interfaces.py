"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

Driven ports usados por todos os domínios do portal:
- UnitOfWork: transação + fila de eventos pós-commit
- EventPublisher: saída dos eventos para handlers
- EventStore: histórico persistido dos eventos
- Relogio: fonte do "agora" (substituível em testes)

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Protocol, runtime_checkable

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            ticket_repo.save(ticket)
            ciclo_repo.adicionar(ciclo)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica os eventos enfileirados.

        Se o commit falhar, os eventos são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento para publicação após commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações no adapter Django: logging síncrono, Celery e
    em memória (testes).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class EventStore(ABC):
    """Persistência do histórico de eventos por agregado."""

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def ultima_sequencia(self, aggregate_id: str) -> int:
        """Maior sequência já gravada para o agregado (0 se nenhuma)."""
        raise NotImplementedError


@runtime_checkable
class Relogio(Protocol):
    """Fonte do instante atual, sempre timezone-aware."""

    def agora(self) -> datetime:
        ...


class RelogioSistema:
    """Relógio real em UTC."""

    def agora(self) -> datetime:
        return datetime.now(timezone.utc)


class RelogioFixo:
    """
    Relógio controlável para testes e reprocessamentos.

    Example:
        relogio = RelogioFixo(datetime(2024, 3, 15, 19, 30, tzinfo=timezone.utc))
        relogio.avancar(timedelta(hours=48))
    """

    def __init__(self, instante: datetime):
        self._instante = instante

    def agora(self) -> datetime:
        return self._instante

    def definir(self, instante: datetime) -> None:
        self._instante = instante

    def avancar(self, delta) -> None:
        self._instante = self._instante + delta

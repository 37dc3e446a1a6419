"""
Domain Events - fatos registrados pelo núcleo.

Eventos são enfileirados no UnitOfWork durante o caso de uso e só
saem (event store + publisher) depois do commit. No portal eles formam
o histórico do chamado: criação, mudanças de status, reaberturas,
alertas de SLA, etc.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


def _agora_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Subclasses são nomeadas no passado (TicketReabertoEvent) e declaram
    apenas seus campos específicos, todos com default.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        ator_id: Usuário que causou o evento (None para o sistema)
        occurred_at: Momento em que o evento ocorreu (UTC)
        version: Versão do schema do evento
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    ator_id: str = None
    occurred_at: datetime = field(default_factory=_agora_utc)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou o evento (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Usado pelo event store, pelo publisher Celery e no log.
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "ator_id": self.ator_id,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos da subclasse (datas viram ISO 8601)."""
        base_fields = {"event_id", "aggregate_id", "ator_id", "occurred_at", "version"}
        data = {}
        for key, value in self.__dict__.items():
            if key in base_fields or key.startswith("_"):
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, tuple):
                value = list(value)
            data[key] = value
        return data

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )

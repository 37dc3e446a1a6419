"""
Shared Domain Components.

Componentes compartilhados entre os domínios do portal:
- Exceções de domínio
- Interfaces (Ports) e relógio
- Base class para Domain Events
- Ator da operação e trilha de auditoria
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    ConcurrencyError,
    AuthorizationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher, EventStore, Relogio, RelogioSistema, RelogioFixo
from .dtos import AtorDTO, SISTEMA
from .auditoria import AuditoriaSink, EntradaAuditoria, InMemoryAuditoriaSink

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "ConcurrencyError",
    "AuthorizationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "EventStore",
    "Relogio",
    "RelogioSistema",
    "RelogioFixo",
    "AtorDTO",
    "SISTEMA",
    "AuditoriaSink",
    "EntradaAuditoria",
    "InMemoryAuditoriaSink",
]

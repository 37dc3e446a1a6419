"""
Entidades do Domínio de Aprovações.

Uma categoria de chamado pode exigir aprovação. Enquanto a aprovação
está pendente o chamado fica em AGUARDANDO_APROVACAO e o ciclo de SLA
fica pausado.

Regras de Negócio Encapsuladas:
- Decisão é terminal: aprovação decidida não pode ser decidida de novo
- Rejeição exige observação
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from intranet.core.shared.exceptions import BusinessRuleViolationError, ValidationError


class ModoAprovacao(Enum):
    """Quem aprova os chamados de uma categoria."""

    REQUESTER_COORDINATOR = "REQUESTER_COORDINATOR"
    TI_ADMIN = "TI_ADMIN"
    SPECIFIC_USERS = "SPECIFIC_USERS"

    @classmethod
    def from_string(cls, value: str) -> "ModoAprovacao":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Modo de aprovação inválido: {value}", field="modo_aprovacao")


class StatusAprovacao(Enum):
    PENDENTE = "PENDING"
    APROVADA = "APPROVED"
    REJEITADA = "REJECTED"


@dataclass
class AprovacaoEntity:
    """
    Aprovação de um chamado.

    Attributes:
        ticket_id: Chamado aguardando aprovação
        modo: Modo copiado da categoria no momento da solicitação
        status: PENDENTE até a decisão
        observacao: Nota do aprovador
        decidido_por_id / decidido_em: Quem e quando decidiu
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    modo: ModoAprovacao = ModoAprovacao.TI_ADMIN
    status: StatusAprovacao = StatusAprovacao.PENDENTE
    observacao: Optional[str] = None
    decidido_por_id: Optional[str] = None
    decidido_em: Optional[datetime] = None
    solicitado_em: Optional[datetime] = None

    @classmethod
    def solicitar(cls, ticket_id: str, modo: ModoAprovacao, agora: datetime) -> "AprovacaoEntity":
        return cls(ticket_id=ticket_id, modo=modo, solicitado_em=agora)

    @property
    def esta_pendente(self) -> bool:
        return self.status == StatusAprovacao.PENDENTE

    def decidir(
        self,
        aprovar: bool,
        decidido_por_id: str,
        agora: datetime,
        observacao: Optional[str] = None,
    ) -> None:
        """
        Registra a decisão.

        Raises:
            BusinessRuleViolationError: Se já decidida
            ValidationError: Se rejeição sem observação
        """
        if not self.esta_pendente:
            raise BusinessRuleViolationError(
                "Aprovação já foi decidida",
                rule="aprovacao_ja_decidida",
            )

        nota = (observacao or "").strip() or None
        if not aprovar and nota is None:
            raise ValidationError("Informe o motivo da rejeição", field="observacao")

        self.status = StatusAprovacao.APROVADA if aprovar else StatusAprovacao.REJEITADA
        self.observacao = nota
        self.decidido_por_id = decidido_por_id
        self.decidido_em = agora

"""
Domain Events do Domínio de Tickets.

Os eventos formam o histórico do chamado: são enfileirados no
UnitOfWork e, após o commit, gravados no event store e publicados.

Eventos:
- TicketCriadoEvent
- TicketStatusAlteradoEvent
- TicketResolvidoEvent / TicketReabertoEvent
- TicketPrioridadeAlteradaEvent / TicketCategoriaAlteradaEvent
- TicketResponsaveisAlteradosEvent
- TicketComentarioAdicionadoEvent / TicketAnexoAdicionadoEvent
- AprovacaoSolicitadaEvent / AprovacaoDecididaEvent
- PrazoResolucaoAlteradoEvent
- AlertaSlaDisparadoEvent

Uso:
    with uow:
        ticket.transicionar(TicketStatus.RESOLVIDO, agora)
        repo.save(ticket)
        uow.publish_event(TicketResolvidoEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from typing import List, Optional

from intranet.core.shared.events import DomainEvent


@dataclass
class TicketEvent(DomainEvent):
    """Base dos eventos cujo agregado é o chamado."""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCriadoEvent(TicketEvent):
    """
    Evento: Chamado foi criado.

    Attributes:
        titulo: Título do chamado
        prioridade: Prioridade inicial
        numero_ciclo: Sempre 1 na criação
        requer_aprovacao: Se entrou direto em AGUARDANDO_APROVACAO
    """

    titulo: str = ""
    prioridade: str = ""
    categoria_id: Optional[str] = None
    numero_ciclo: int = 1
    requer_aprovacao: bool = False


@dataclass
class TicketStatusAlteradoEvent(TicketEvent):
    """Mudança de status sem efeito no ciclo de SLA."""

    de: str = ""
    para: str = ""


@dataclass
class TicketResolvidoEvent(TicketEvent):
    """
    Evento: Chamado foi resolvido.

    Attributes:
        numero_ciclo: Ciclo encerrado pela resolução
        resolucao_violada: Se o prazo de resolução já tinha passado
    """

    de: str = ""
    numero_ciclo: int = 0
    resolucao_violada: bool = False


@dataclass
class TicketReabertoEvent(TicketEvent):
    """
    Evento: Chamado resolvido/cancelado voltou para ABERTO.

    Attributes:
        numero_ciclo: Número do novo ciclo de SLA
    """

    de: str = ""
    numero_ciclo: int = 0


@dataclass
class TicketCanceladoEvent(TicketEvent):

    de: str = ""
    numero_ciclo: int = 0


@dataclass
class TicketPrioridadeAlteradaEvent(TicketEvent):
    """Prazos do ciclo ativo não são recalculados."""

    de: str = ""
    para: str = ""


@dataclass
class TicketCategoriaAlteradaEvent(TicketEvent):

    de: Optional[str] = None
    para: Optional[str] = None


@dataclass
class TicketResponsaveisAlteradosEvent(TicketEvent):

    responsaveis_ids: List[str] = field(default_factory=list)
    adicionados: List[str] = field(default_factory=list)
    removidos: List[str] = field(default_factory=list)


@dataclass
class TicketComentarioAdicionadoEvent(TicketEvent):

    comentario_id: str = ""
    interno: bool = False


@dataclass
class TicketAnexoAdicionadoEvent(TicketEvent):

    anexo_id: str = ""
    nome_arquivo: str = ""


@dataclass
class PrimeiraRespostaRegistradaEvent(TicketEvent):

    numero_ciclo: int = 0
    violada: bool = False


@dataclass
class AprovacaoSolicitadaEvent(TicketEvent):

    aprovacao_id: str = ""
    modo: str = ""


@dataclass
class AprovacaoDecididaEvent(TicketEvent):
    """
    Evento: Aprovação foi decidida.

    Attributes:
        status: APPROVED ou REJECTED
        minutos_pausados: Minutos úteis em que o ciclo ficou pausado
    """

    aprovacao_id: str = ""
    status: str = ""
    minutos_pausados: int = 0


@dataclass
class PrazoResolucaoAlteradoEvent(TicketEvent):

    numero_ciclo: int = 0
    resolucao_ate: str = ""
    motivo: Optional[str] = None


@dataclass
class AlertaSlaDisparadoEvent(TicketEvent):
    """
    Evento: Varredura disparou um alerta de SLA.

    Só é emitido quando a guarda de deduplicação foi criada agora.

    Attributes:
        numero_ciclo: Ciclo avaliado
        tipo_alerta: FIRST_RISK, FIRST_BREACH, RES_RISK ou RES_BREACH
        destinatarios: Quantidade de notificações geradas
    """

    numero_ciclo: int = 0
    tipo_alerta: str = ""
    destinatarios: int = 0

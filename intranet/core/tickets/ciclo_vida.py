"""
Ciclo de vida do chamado - efeitos das transições sobre o SLA.

Serviço de domínio usado pelos casos de uso dentro da transação deles
(`with uow:`). Concentra o que cada transição faz com os ciclos:

    Criação                  → ciclo 1
    → AGUARDANDO_APROVACAO   → pausa o ciclo e solicita aprovação
    → RESOLVIDO / CANCELADO  → encerra o ciclo ativo
    RESOLVIDO/CANCELADO → ABERTO (reabertura) → novo ciclo (último + 1)
    demais                   → só o evento de mudança de status
"""

from datetime import datetime, timedelta
import logging
from typing import Optional

from intranet.core.aprovacoes.entities import AprovacaoEntity
from intranet.core.aprovacoes.ports import AprovacaoRepository
from intranet.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
)
from intranet.core.shared.interfaces import UnitOfWork
from intranet.core.sla.dtos import CicloSlaOutputDTO
from intranet.core.sla.entities import LIMIAR_RISCO_PADRAO, CicloSlaEntity
from intranet.core.sla.politicas import ResolvedorPoliticaSla
from intranet.core.sla.ports import CicloSlaRepository

from .dtos import TicketOutputDTO
from .entities import CategoriaEntity, TicketEntity, TicketStatus
from .events import (
    AprovacaoSolicitadaEvent,
    PrimeiraRespostaRegistradaEvent,
    TicketCanceladoEvent,
    TicketReabertoEvent,
    TicketResolvidoEvent,
    TicketStatusAlteradoEvent,
)

logger = logging.getLogger(__name__)


class CicloDeVidaTicket:
    """
    Aplica transições de status e seus efeitos no ciclo de SLA.

    Example:
        with uow:
            ticket = ticket_repo.get_by_id_para_atualizacao(ticket_id)
            ciclo_vida.transicionar(ticket, TicketStatus.RESOLVIDO, agora, ator.id)
    """

    def __init__(
        self,
        ticket_repo,
        ciclo_repo: CicloSlaRepository,
        aprovacao_repo: AprovacaoRepository,
        resolvedor_politica: ResolvedorPoliticaSla,
        uow: UnitOfWork,
        limiar_risco: timedelta = LIMIAR_RISCO_PADRAO,
    ):
        self.ticket_repo = ticket_repo
        self.ciclo_repo = ciclo_repo
        self.aprovacao_repo = aprovacao_repo
        self.resolvedor_politica = resolvedor_politica
        self.uow = uow
        self.limiar_risco = limiar_risco

    def abrir_ciclo(self, ticket: TicketEntity, numero_ciclo: int, agora: datetime) -> CicloSlaEntity:
        """
        Cria o ciclo `numero_ciclo` com prazos calculados a partir de `agora`.

        Raises:
            ConcurrencyError: Se o número já foi usado (reabertura concorrente)
        """
        prazos = self.resolvedor_politica.calcular_prazos(agora, ticket.prioridade)
        ciclo = CicloSlaEntity.abrir(ticket.id, numero_ciclo, agora, prazos)
        self.ciclo_repo.adicionar(ciclo)
        logger.debug(f"Ciclo {numero_ciclo} aberto para o chamado {ticket.id}")
        return ciclo

    def transicionar(
        self,
        ticket: TicketEntity,
        novo_status: TicketStatus,
        agora: datetime,
        ator_id: str,
        categoria: Optional[CategoriaEntity] = None,
    ) -> Optional[CicloSlaEntity]:
        """
        Muda o status do chamado e aplica o efeito no SLA.

        Não persiste o chamado; quem chama faz `ticket_repo.save`.

        Returns:
            Ciclo corrente após a transição (None se o chamado não tem ciclo)

        Raises:
            BusinessRuleViolationError: Transição inválida, aprovação pendente
                ou categoria sem aprovação
            ConcurrencyError: Reabertura perdeu a corrida para outra requisição
        """
        if ticket.status == TicketStatus.AGUARDANDO_APROVACAO:
            raise BusinessRuleViolationError(
                "Chamado aguarda aprovação; use a decisão de aprovação",
                rule="aprovacao_pendente",
            )
        if novo_status == TicketStatus.AGUARDANDO_APROVACAO and not (
            categoria is not None and categoria.requer_aprovacao
        ):
            raise BusinessRuleViolationError(
                "Categoria do chamado não exige aprovação",
                rule="categoria_sem_aprovacao",
            )

        reabertura = ticket.e_reabertura(novo_status)
        anterior = ticket.transicionar(novo_status, agora)
        ciclo = self.ciclo_repo.obter_ultimo(ticket.id)

        if reabertura:
            if ciclo is not None and ciclo.esta_ativo:
                raise ConcurrencyError(
                    f"Chamado {ticket.id} já foi reaberto (ciclo {ciclo.numero_ciclo} ativo)"
                )
            numero = (ciclo.numero_ciclo if ciclo else 0) + 1
            ciclo = self.abrir_ciclo(ticket, numero, agora)
            self.uow.publish_event(
                TicketReabertoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator_id,
                    occurred_at=agora,
                    de=anterior.value,
                    numero_ciclo=numero,
                )
            )

        elif novo_status == TicketStatus.RESOLVIDO:
            self._encerrar(ciclo, agora)
            self.uow.publish_event(
                TicketResolvidoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator_id,
                    occurred_at=agora,
                    de=anterior.value,
                    numero_ciclo=ciclo.numero_ciclo if ciclo else 0,
                    resolucao_violada=ciclo.resolucao_violada if ciclo else False,
                )
            )

        elif novo_status == TicketStatus.CANCELADO:
            self._encerrar(ciclo, agora)
            self.uow.publish_event(
                TicketCanceladoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator_id,
                    occurred_at=agora,
                    de=anterior.value,
                    numero_ciclo=ciclo.numero_ciclo if ciclo else 0,
                )
            )

        elif novo_status == TicketStatus.AGUARDANDO_APROVACAO:
            self.solicitar_aprovacao(ticket, ciclo, categoria, agora, ator_id)

        else:
            self.uow.publish_event(
                TicketStatusAlteradoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator_id,
                    occurred_at=agora,
                    de=anterior.value,
                    para=novo_status.value,
                )
            )

        return ciclo

    def solicitar_aprovacao(
        self,
        ticket: TicketEntity,
        ciclo: Optional[CicloSlaEntity],
        categoria: CategoriaEntity,
        agora: datetime,
        ator_id: str,
    ) -> AprovacaoEntity:
        """Cria a aprovação pendente e pausa o ciclo ativo."""
        if ciclo is not None and ciclo.esta_ativo:
            ciclo.pausar(agora)
            self.ciclo_repo.save(ciclo)

        aprovacao = AprovacaoEntity.solicitar(ticket.id, categoria.modo_aprovacao, agora)
        self.aprovacao_repo.save(aprovacao)
        self.uow.publish_event(
            AprovacaoSolicitadaEvent(
                aggregate_id=ticket.id,
                ator_id=ator_id,
                occurred_at=agora,
                aprovacao_id=aprovacao.id,
                modo=aprovacao.modo.value,
            )
        )
        return aprovacao

    def capturar_primeira_resposta(self, ticket: TicketEntity, agora: datetime, ator_id: str) -> bool:
        """
        Registra a primeira resposta no ciclo ativo, se ainda não houve.

        Returns:
            True se registrou agora
        """
        ciclo = self.ciclo_repo.obter_ultimo(ticket.id)
        if ciclo is None or not ciclo.registrar_primeira_resposta(agora):
            return False

        self.ciclo_repo.save(ciclo)
        self.uow.publish_event(
            PrimeiraRespostaRegistradaEvent(
                aggregate_id=ticket.id,
                ator_id=ator_id,
                occurred_at=agora,
                numero_ciclo=ciclo.numero_ciclo,
                violada=ciclo.primeira_resposta_violada,
            )
        )
        return True

    def _encerrar(self, ciclo: Optional[CicloSlaEntity], agora: datetime) -> None:
        if ciclo is not None and ciclo.resolver(agora):
            self.ciclo_repo.save(ciclo)

    def saida(
        self,
        ticket: TicketEntity,
        agora: datetime,
        ciclo: Optional[CicloSlaEntity] = None,
    ) -> TicketOutputDTO:
        """Monta o DTO de saída com o ciclo corrente e o estado do SLA."""
        if ciclo is None:
            ciclo = self.ciclo_repo.obter_ultimo(ticket.id)
        if ciclo is None:
            return TicketOutputDTO.from_entity(ticket)
        return TicketOutputDTO.from_entity(
            ticket,
            ciclo_sla=CicloSlaOutputDTO.from_entity(ciclo),
            estado_sla=ciclo.estado(agora, self.limiar_risco).value,
        )

"""
Use Cases do Domínio de SLA.

- ListarPoliticasSlaService: políticas cadastradas
- SalvarPoliticaSlaService: cria/atualiza a política de uma prioridade (admin)
- VarreduraEscalonamentoSlaService: varredura periódica de risco/violação

A varredura não sabe quem a dispara (Celery beat, cron, script);
o gatilho só chama `execute()`.
"""

from datetime import timedelta
import logging
from typing import Dict, List

from intranet.core.notificacoes.entities import NotificacaoEntity, TIPO_STATUS_CHAMADO
from intranet.core.notificacoes.ports import (
    ConfiguracaoNotificacaoRepository,
    NotificacaoRepository,
)
from intranet.core.shared.auditoria import AuditoriaSink, EntradaAuditoria
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.identidade import DiretorioUsuarios
from intranet.core.shared.interfaces import Relogio, UnitOfWork
from intranet.core.tickets.entities import STATUS_ATIVOS, TicketEntity
from intranet.core.tickets.events import AlertaSlaDisparadoEvent
from intranet.core.tickets.ports import TicketRepository

from .dtos import PoliticaSlaOutputDTO, ResultadoVarreduraDTO, SalvarPoliticaSlaInputDTO
from .entities import (
    LIMIAR_RISCO_PADRAO,
    Prioridade,
    SlaPoliticaEntity,
    TipoAlertaSla,
)
from .politicas import NOMES_POLITICAS_PADRAO
from .ports import AlertaDedupRepository, CicloSlaRepository, SlaPoliticaRepository

logger = logging.getLogger(__name__)


class ListarPoliticasSlaService:

    def __init__(self, politica_repo: SlaPoliticaRepository):
        self.politica_repo = politica_repo

    def execute(self) -> List[PoliticaSlaOutputDTO]:
        ordem = list(Prioridade)
        politicas = sorted(self.politica_repo.list_all(), key=lambda p: ordem.index(p.prioridade))
        return [PoliticaSlaOutputDTO.from_entity(p) for p in politicas]


class SalvarPoliticaSlaService:
    """
    Use Case: Criar ou atualizar a política de SLA de uma prioridade.

    Existe no máximo uma política por prioridade. Prazos de ciclos já
    abertos não são recalculados.
    """

    def __init__(
        self,
        politica_repo: SlaPoliticaRepository,
        uow: UnitOfWork,
        auditoria: AuditoriaSink,
    ):
        self.politica_repo = politica_repo
        self.uow = uow
        self.auditoria = auditoria

    def execute(self, input_dto: SalvarPoliticaSlaInputDTO, ator: AtorDTO) -> PoliticaSlaOutputDTO:
        ator.exigir_admin()
        prioridade = Prioridade.from_string(input_dto.prioridade)

        with self.uow:
            politica = self.politica_repo.get_por_prioridade(prioridade)
            if politica is None:
                politica = SlaPoliticaEntity.criar(
                    prioridade=prioridade,
                    minutos_primeira_resposta=input_dto.minutos_primeira_resposta,
                    minutos_resolucao=input_dto.minutos_resolucao,
                    nome=input_dto.nome or NOMES_POLITICAS_PADRAO[prioridade],
                    ativa=input_dto.ativa,
                )
            else:
                politica.alterar_metas(
                    input_dto.minutos_primeira_resposta,
                    input_dto.minutos_resolucao,
                )
                politica.ativa = input_dto.ativa
                if input_dto.nome.strip():
                    politica.nome = input_dto.nome.strip()

            self.politica_repo.save(politica)

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="sla_policy_update",
                alvo_tipo="sla_policy",
                alvo_id=prioridade.value,
                metadados={
                    "firstResponseMinutes": politica.minutos_primeira_resposta,
                    "resolutionMinutes": politica.minutos_resolucao,
                    "isActive": politica.ativa,
                },
            )
        )
        return PoliticaSlaOutputDTO.from_entity(politica)


# tipo de alerta -> (título, modelo da mensagem)
TEXTOS_ALERTA: Dict[TipoAlertaSla, tuple] = {
    TipoAlertaSla.FIRST_BREACH: (
        "SLA estourado: Primeira resposta",
        'Chamado "{titulo}" estourou o SLA de primeira resposta.',
    ),
    TipoAlertaSla.FIRST_RISK: (
        "SLA em risco: Primeira resposta",
        'Chamado "{titulo}" está próximo do prazo de primeira resposta.',
    ),
    TipoAlertaSla.RES_BREACH: (
        "SLA estourado: Resolução",
        'Chamado "{titulo}" estourou o SLA de resolução.',
    ),
    TipoAlertaSla.RES_RISK: (
        "SLA em risco: Resolução",
        'Chamado "{titulo}" está próximo do prazo de resolução.',
    ),
}


class VarreduraEscalonamentoSlaService:
    """
    Use Case: Varredura de escalonamento de SLA.

    Fluxo:
    1. Encerrar cedo se notificações "ticket_status" estão desligadas
    2. Para cada chamado ativo cujo último ciclo está em andamento e não pausado
    3. Avaliar alertas (risco/violação de primeira resposta e resolução)
    4. Para cada alerta, travar o chamado e gravar a guarda (ticket, ciclo, tipo); só quem
       gravou gera notificações para responsáveis + admins

    Erro na avaliação de um chamado é registrado e a varredura segue.
    Execuções sobrepostas geram no máximo um lote por guarda, porque a
    guarda depende da restrição de unicidade do repositório.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        ciclo_repo: CicloSlaRepository,
        dedup_repo: AlertaDedupRepository,
        notificacao_repo: NotificacaoRepository,
        config_repo: ConfiguracaoNotificacaoRepository,
        diretorio: DiretorioUsuarios,
        relogio: Relogio,
        uow: UnitOfWork,
        limiar_risco: timedelta = LIMIAR_RISCO_PADRAO,
    ):
        self.ticket_repo = ticket_repo
        self.ciclo_repo = ciclo_repo
        self.dedup_repo = dedup_repo
        self.notificacao_repo = notificacao_repo
        self.config_repo = config_repo
        self.diretorio = diretorio
        self.relogio = relogio
        self.uow = uow
        self.limiar_risco = limiar_risco

    def execute(self) -> ResultadoVarreduraDTO:
        resultado = ResultadoVarreduraDTO()

        if not self.config_repo.esta_habilitada(TIPO_STATUS_CHAMADO):
            logger.info("Varredura de SLA ignorada: notificações de chamado desabilitadas")
            resultado.ignorada = True
            return resultado

        agora = self.relogio.agora()
        admins = set(self.diretorio.listar_admins_ativos())

        for ticket in self.ticket_repo.list_by_status_in(STATUS_ATIVOS):
            try:
                self._avaliar_ticket(ticket, agora, admins, resultado)
            except Exception:
                logger.exception(f"Falha ao avaliar SLA do chamado {ticket.id}")
                resultado.erros += 1
                resultado.tickets_com_erro.append(ticket.id)

        logger.info(
            f"Varredura de SLA concluída: {resultado.tickets_avaliados} avaliados, "
            f"{resultado.alertas_disparados} alertas, "
            f"{resultado.notificacoes_criadas} notificações, {resultado.erros} erros"
        )
        return resultado

    def _avaliar_ticket(self, ticket: TicketEntity, agora, admins: set, resultado: ResultadoVarreduraDTO) -> None:
        ciclo = self.ciclo_repo.obter_ultimo(ticket.id)
        if ciclo is None or not ciclo.esta_ativo or ciclo.esta_pausado:
            return

        resultado.tickets_avaliados += 1
        alertas = ciclo.avaliar_alertas(agora, self.limiar_risco)

        for tipo in alertas:
            with self.uow:
                # Mesma trava dos casos de uso: eventos do chamado saem em série
                travado = self.ticket_repo.get_by_id_para_atualizacao(ticket.id)
                if travado is None:
                    continue
                if not self.dedup_repo.inserir_se_ausente(ticket.id, ciclo.numero_ciclo, tipo):
                    continue

                destinatarios = sorted(set(travado.responsaveis_ids) | admins)
                notificacoes = self._montar_notificacoes(ticket, tipo, destinatarios, agora)
                if notificacoes:
                    self.notificacao_repo.inserir_lote(notificacoes)

                self.uow.publish_event(
                    AlertaSlaDisparadoEvent(
                        aggregate_id=ticket.id,
                        occurred_at=agora,
                        numero_ciclo=ciclo.numero_ciclo,
                        tipo_alerta=tipo.value,
                        destinatarios=len(notificacoes),
                    )
                )

            resultado.alertas_disparados += 1
            resultado.notificacoes_criadas += len(notificacoes)
            logger.info(
                f"Alerta {tipo.value} do chamado {ticket.id} (ciclo {ciclo.numero_ciclo}) "
                f"para {len(notificacoes)} destinatários"
            )

    @staticmethod
    def _montar_notificacoes(
        ticket: TicketEntity,
        tipo: TipoAlertaSla,
        destinatarios: List[str],
        agora,
    ) -> List[NotificacaoEntity]:
        titulo, modelo = TEXTOS_ALERTA[tipo]
        return [
            NotificacaoEntity(
                usuario_id=usuario_id,
                tipo=TIPO_STATUS_CHAMADO,
                titulo=titulo,
                mensagem=modelo.format(titulo=ticket.titulo),
                link_url=f"/tickets/{ticket.id}",
                dados={"alertType": tipo.value},
                criado_em=agora,
            )
            for usuario_id in destinatarios
        ]

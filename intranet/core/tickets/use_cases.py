"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso expostos à camada de requisição.
Cada um orquestra entidades, repositórios, ciclo de SLA e eventos
dentro de uma transação (`with self.uow:`).

Use Cases implementados:
- CriarTicketService: abre chamado (ciclo 1, aprovação se a categoria exigir)
- AtualizarTicketService: status/prioridade/categoria (admin)
- DefinirResponsaveisService: substitui responsáveis (admin)
- AdicionarComentarioService / ListarComentariosService
- AdicionarAnexoService / ListarAnexosService
- DecidirAprovacaoService / ObterAprovacaoService
- DefinirPrazoResolucaoManualService: prazo manual no ciclo ativo (admin)
- ObterTicketService / ListarTicketsService

Entradas de auditoria são emitidas depois do commit.
"""

import logging
from typing import Dict, List, Optional

from intranet.core.aprovacoes.entities import ModoAprovacao
from intranet.core.aprovacoes.ports import AprovacaoRepository
from intranet.core.aprovacoes.resolvers import ResolvedorAprovadores
from intranet.core.shared.auditoria import AuditoriaSink, EntradaAuditoria
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    ValidationError,
)
from intranet.core.shared.identidade import DiretorioUsuarios
from intranet.core.shared.interfaces import Relogio, UnitOfWork
from intranet.core.sla.entities import Prioridade
from intranet.core.sla.ports import CicloSlaRepository

from .ciclo_vida import CicloDeVidaTicket
from .dtos import (
    AdicionarAnexoInputDTO,
    AdicionarComentarioInputDTO,
    AnexoOutputDTO,
    AprovacaoOutputDTO,
    AtualizarTicketInputDTO,
    ComentarioOutputDTO,
    CriarTicketInputDTO,
    DecidirAprovacaoInputDTO,
    DefinirPrazoManualInputDTO,
    DefinirResponsaveisInputDTO,
    TicketListItemDTO,
    TicketOutputDTO,
)
from .entities import (
    AnexoEntity,
    CategoriaEntity,
    ComentarioEntity,
    TicketEntity,
    TicketStatus,
)
from .events import (
    AprovacaoDecididaEvent,
    PrazoResolucaoAlteradoEvent,
    TicketAnexoAdicionadoEvent,
    TicketCategoriaAlteradaEvent,
    TicketComentarioAdicionadoEvent,
    TicketCriadoEvent,
    TicketPrioridadeAlteradaEvent,
    TicketResponsaveisAlteradosEvent,
)
from .ports import (
    AnexoRepository,
    CategoriaRepository,
    ComentarioRepository,
    TicketRepository,
)

logger = logging.getLogger(__name__)


MENSAGEM_COMENTARIO_FORA_DE_STATUS = (
    "Comentários só são permitidos quando o chamado está aguardando usuário"
)
MENSAGEM_COMENTARIO_INTERNO = "Comentários internos são exclusivos para administradores"
MENSAGEM_ANEXO_FORA_DE_STATUS = "Anexos só são permitidos quando o chamado está aguardando usuário"


def _carregar_ticket(
    ticket_repo: TicketRepository,
    ticket_id: str,
    para_atualizacao: bool = False,
) -> TicketEntity:
    if para_atualizacao:
        ticket = ticket_repo.get_by_id_para_atualizacao(ticket_id)
    else:
        ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Chamado {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id,
        )
    return ticket


def _exigir_acesso(ticket: TicketEntity, ator: AtorDTO) -> None:
    if not ticket.pode_ser_acessado_por(ator.id, ator.e_admin):
        raise AuthorizationError("Sem acesso a este chamado")


def _carregar_categoria(
    categoria_repo: CategoriaRepository,
    categoria_id: Optional[str],
) -> Optional[CategoriaEntity]:
    if not categoria_id:
        return None
    categoria = categoria_repo.get_by_id(categoria_id)
    if categoria is None:
        raise EntityNotFoundError(
            f"Categoria {categoria_id} não encontrada",
            entity_type="Categoria",
            entity_id=categoria_id,
        )
    return categoria


class CriarTicketService:
    """
    Use Case: Abrir um novo chamado.

    Fluxo:
    1. Resolver o setor de destino configurado
    2. Criar entidade com prioridade (default MEDIA)
    3. Abrir o ciclo 1 com prazos da política da prioridade
    4. Se a categoria exige aprovação: AGUARDANDO_APROVACAO, ciclo pausado
    5. Disparar TicketCriado e auditar

    Example:
        service = CriarTicketService(...)
        output = service.execute(
            CriarTicketInputDTO(titulo="VPN fora", descricao="Erro 809 desde ontem"),
            AtorDTO(id="user-1"),
        )
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        categoria_repo: CategoriaRepository,
        ciclo_vida: CicloDeVidaTicket,
        diretorio: DiretorioUsuarios,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
        setor_destino_nome: str = "Tech",
    ):
        self.ticket_repo = ticket_repo
        self.categoria_repo = categoria_repo
        self.ciclo_vida = ciclo_vida
        self.diretorio = diretorio
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow
        self.setor_destino_nome = setor_destino_nome

    def execute(self, input_dto: CriarTicketInputDTO, ator: AtorDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Dados inválidos ou categoria inativa
            EntityNotFoundError: Setor de destino ou categoria inexistente
        """
        with self.uow:
            setor_destino_id = self.diretorio.obter_setor_id_por_nome(self.setor_destino_nome)
            if not setor_destino_id:
                raise EntityNotFoundError(
                    f"Setor de destino '{self.setor_destino_nome}' não encontrado",
                    entity_type="Setor",
                    entity_id=self.setor_destino_nome,
                )

            prioridade = Prioridade.from_string(input_dto.prioridade or Prioridade.MEDIA.value)
            categoria = _carregar_categoria(self.categoria_repo, input_dto.categoria_id)
            if categoria is not None and not categoria.ativa:
                raise ValidationError("Categoria inativa", field="categoria_id")

            agora = self.relogio.agora()
            ticket = TicketEntity.criar(
                titulo=input_dto.titulo,
                descricao=input_dto.descricao,
                criador_id=ator.id,
                setor_destino_id=setor_destino_id,
                agora=agora,
                prioridade=prioridade,
                setor_solicitante_id=input_dto.setor_solicitante_id,
                categoria_id=input_dto.categoria_id,
                tags=list(input_dto.tags),
            )
            self.ticket_repo.save(ticket)

            ciclo = self.ciclo_vida.abrir_ciclo(ticket, 1, agora)
            requer_aprovacao = categoria is not None and categoria.requer_aprovacao

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator.id,
                    occurred_at=agora,
                    titulo=ticket.titulo,
                    prioridade=ticket.prioridade.value,
                    categoria_id=ticket.categoria_id,
                    numero_ciclo=ciclo.numero_ciclo,
                    requer_aprovacao=requer_aprovacao,
                )
            )

            if requer_aprovacao:
                ticket.transicionar(TicketStatus.AGUARDANDO_APROVACAO, agora)
                self.ticket_repo.save(ticket)
                self.ciclo_vida.solicitar_aprovacao(ticket, ciclo, categoria, agora, ator.id)

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_create",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={"title": ticket.titulo},
            )
        )
        logger.info(f"Chamado {ticket.id} criado por {ator.id} ({ticket.prioridade.value})")

        return self.ciclo_vida.saida(ticket, agora, ciclo)


class AtualizarTicketService:
    """
    Use Case: Atualização combinada de admin (status, prioridade, categoria).

    Ordem de aplicação: categoria, prioridade, status. Assim a reabertura
    usa a prioridade enviada na mesma requisição e a entrada em
    AGUARDANDO_APROVACAO usa a categoria enviada.

    Trocar a prioridade não recalcula prazos do ciclo ativo.

    O chamado é lido sob trava: de duas reaberturas simultâneas, a segunda
    já lê ABERTO e devolve o chamado sem mudanças.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        categoria_repo: CategoriaRepository,
        ciclo_vida: CicloDeVidaTicket,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.categoria_repo = categoria_repo
        self.ciclo_vida = ciclo_vida
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: AtualizarTicketInputDTO, ator: AtorDTO) -> TicketOutputDTO:
        """
        Raises:
            AuthorizationError: Ator não é admin
            EntityNotFoundError: Chamado ou categoria inexistente
            BusinessRuleViolationError: Transição inválida
            ConcurrencyError: Reabertura concorrente
        """
        ator.exigir_admin()
        novo_status = TicketStatus.from_string(input_dto.status) if input_dto.status else None
        nova_prioridade = Prioridade.from_string(input_dto.prioridade) if input_dto.prioridade else None
        alteracoes: Dict[str, dict] = {}

        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)

            if input_dto.alterar_categoria:
                _carregar_categoria(self.categoria_repo, input_dto.categoria_id)
                categoria_anterior = ticket.categoria_id
                if ticket.alterar_categoria(input_dto.categoria_id, agora):
                    alteracoes["categoria"] = {"from": categoria_anterior, "to": ticket.categoria_id}
                    self.uow.publish_event(
                        TicketCategoriaAlteradaEvent(
                            aggregate_id=ticket.id,
                            ator_id=ator.id,
                            occurred_at=agora,
                            de=categoria_anterior,
                            para=ticket.categoria_id,
                        )
                    )

            if nova_prioridade is not None:
                anterior = ticket.alterar_prioridade(nova_prioridade, agora)
                if anterior is not None:
                    alteracoes["prioridade"] = {"from": anterior.value, "to": nova_prioridade.value}
                    self.uow.publish_event(
                        TicketPrioridadeAlteradaEvent(
                            aggregate_id=ticket.id,
                            ator_id=ator.id,
                            occurred_at=agora,
                            de=anterior.value,
                            para=nova_prioridade.value,
                        )
                    )

            ciclo = None
            if novo_status is not None and novo_status != ticket.status:
                status_anterior = ticket.status
                categoria = _carregar_categoria(self.categoria_repo, ticket.categoria_id)
                ciclo = self.ciclo_vida.transicionar(ticket, novo_status, agora, ator.id, categoria)
                alteracoes["status"] = {"from": status_anterior.value, "to": novo_status.value}

            self.ticket_repo.save(ticket)

        if alteracoes:
            self.auditoria.registrar(
                EntradaAuditoria(
                    ator_id=ator.id,
                    acao="ticket_update",
                    alvo_tipo="ticket",
                    alvo_id=ticket.id,
                    metadados=alteracoes,
                )
            )

        return self.ciclo_vida.saida(ticket, agora, ciclo)


class DefinirResponsaveisService:
    """
    Use Case: Substituir os responsáveis do chamado (admin).

    A primeira atribuição conta como primeira resposta do ciclo ativo.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        ciclo_vida: CicloDeVidaTicket,
        diretorio: DiretorioUsuarios,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.ciclo_vida = ciclo_vida
        self.diretorio = diretorio
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: DefinirResponsaveisInputDTO, ator: AtorDTO) -> TicketOutputDTO:
        ator.exigir_admin()

        solicitados = [uid for uid in input_dto.usuario_ids if uid]
        ativos = self.diretorio.filtrar_usuarios_ativos(solicitados)
        invalidos = sorted(set(solicitados) - ativos)
        if invalidos:
            raise ValidationError(
                f"Usuários inexistentes ou inativos: {', '.join(invalidos)}",
                field="usuario_ids",
            )

        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)
            adicionados, removidos = ticket.definir_responsaveis(solicitados, agora)
            self.ticket_repo.save(ticket)

            if adicionados or removidos:
                self.uow.publish_event(
                    TicketResponsaveisAlteradosEvent(
                        aggregate_id=ticket.id,
                        ator_id=ator.id,
                        occurred_at=agora,
                        responsaveis_ids=list(ticket.responsaveis_ids),
                        adicionados=adicionados,
                        removidos=removidos,
                    )
                )
            if adicionados:
                self.ciclo_vida.capturar_primeira_resposta(ticket, agora, ator.id)

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_assignees",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={"assigneeIds": list(ticket.responsaveis_ids)},
            )
        )
        return self.ciclo_vida.saida(ticket, agora)


class AdicionarComentarioService:
    """
    Use Case: Comentar em um chamado.

    Regras:
    - Não-admin só comenta com o chamado em AGUARDANDO_USUARIO
    - Não-admin não pode criar comentário interno
    - Primeiro comentário público de admin é a primeira resposta do ciclo
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        comentario_repo: ComentarioRepository,
        ciclo_vida: CicloDeVidaTicket,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo
        self.ciclo_vida = ciclo_vida
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: AdicionarComentarioInputDTO, ator: AtorDTO) -> ComentarioOutputDTO:
        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)
            _exigir_acesso(ticket, ator)

            if not ator.e_admin:
                if ticket.status != TicketStatus.AGUARDANDO_USUARIO:
                    raise ValidationError(MENSAGEM_COMENTARIO_FORA_DE_STATUS, field="status")
                if input_dto.interno:
                    raise ValidationError(MENSAGEM_COMENTARIO_INTERNO, field="interno")

            comentario = ComentarioEntity.criar(
                ticket_id=ticket.id,
                autor_id=ator.id,
                corpo=input_dto.corpo,
                agora=agora,
                interno=ator.e_admin and input_dto.interno,
            )
            self.comentario_repo.save(comentario)

            if ator.e_admin and not comentario.interno:
                self.ciclo_vida.capturar_primeira_resposta(ticket, agora, ator.id)

            self.uow.publish_event(
                TicketComentarioAdicionadoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator.id,
                    occurred_at=agora,
                    comentario_id=comentario.id,
                    interno=comentario.interno,
                )
            )

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_comment",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={"commentId": comentario.id, "isInternal": comentario.interno},
            )
        )
        return ComentarioOutputDTO.from_entity(comentario)


class ListarComentariosService:
    """Comentários do chamado; internos só para admins."""

    def __init__(self, ticket_repo: TicketRepository, comentario_repo: ComentarioRepository):
        self.ticket_repo = ticket_repo
        self.comentario_repo = comentario_repo

    def execute(self, ticket_id: str, ator: AtorDTO) -> List[ComentarioOutputDTO]:
        ticket = _carregar_ticket(self.ticket_repo, ticket_id)
        _exigir_acesso(ticket, ator)
        comentarios = self.comentario_repo.list_by_ticket(ticket_id, incluir_internos=ator.e_admin)
        return [ComentarioOutputDTO.from_entity(c) for c in comentarios]


class AdicionarAnexoService:
    """
    Use Case: Registrar metadados de um anexo.

    Mesma regra de status dos comentários para não-admins.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        anexo_repo: AnexoRepository,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.anexo_repo = anexo_repo
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: AdicionarAnexoInputDTO, ator: AtorDTO) -> AnexoOutputDTO:
        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)
            _exigir_acesso(ticket, ator)

            if not ator.e_admin and ticket.status != TicketStatus.AGUARDANDO_USUARIO:
                raise ValidationError(MENSAGEM_ANEXO_FORA_DE_STATUS, field="status")

            anexo = AnexoEntity.criar(
                ticket_id=ticket.id,
                autor_id=ator.id,
                nome_arquivo=input_dto.nome_arquivo,
                caminho=input_dto.caminho,
                tamanho_bytes=input_dto.tamanho_bytes,
                agora=agora,
                content_type=input_dto.content_type,
            )
            self.anexo_repo.save(anexo)
            self.uow.publish_event(
                TicketAnexoAdicionadoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator.id,
                    occurred_at=agora,
                    anexo_id=anexo.id,
                    nome_arquivo=anexo.nome_arquivo,
                )
            )

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_attachment",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={"attachmentId": anexo.id, "fileName": anexo.nome_arquivo},
            )
        )
        return AnexoOutputDTO.from_entity(anexo)


class ListarAnexosService:

    def __init__(self, ticket_repo: TicketRepository, anexo_repo: AnexoRepository):
        self.ticket_repo = ticket_repo
        self.anexo_repo = anexo_repo

    def execute(self, ticket_id: str, ator: AtorDTO) -> List[AnexoOutputDTO]:
        ticket = _carregar_ticket(self.ticket_repo, ticket_id)
        _exigir_acesso(ticket, ator)
        return [AnexoOutputDTO.from_entity(a) for a in self.anexo_repo.list_by_ticket(ticket_id)]


class _ConsultaAprovadores:
    """Resolve o conjunto de aprovadores pelo modo da aprovação."""

    def __init__(
        self,
        categoria_repo: CategoriaRepository,
        resolvedores: Dict[ModoAprovacao, ResolvedorAprovadores],
    ):
        self.categoria_repo = categoria_repo
        self.resolvedores = resolvedores

    def aprovadores(self, ticket: TicketEntity, modo: ModoAprovacao) -> set:
        categoria = self.categoria_repo.get_by_id(ticket.categoria_id) if ticket.categoria_id else None
        return self.resolvedores[modo].resolver(ticket, categoria)


class DecidirAprovacaoService:
    """
    Use Case: Aprovar ou rejeitar um chamado.

    Aprovar: EM_ANDAMENTO e o ciclo retoma (prazos deslocados pelos
    minutos úteis pausados). Rejeitar: CANCELADO, ciclo encerrado.

    Raises:
        AuthorizationError: Ator fora do conjunto de aprovadores
        BusinessRuleViolationError: Aprovação já decidida
        ValidationError: Rejeição sem observação
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        aprovacao_repo: AprovacaoRepository,
        ciclo_repo: CicloSlaRepository,
        categoria_repo: CategoriaRepository,
        resolvedores: Dict[ModoAprovacao, ResolvedorAprovadores],
        ciclo_vida: CicloDeVidaTicket,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.aprovacao_repo = aprovacao_repo
        self.ciclo_repo = ciclo_repo
        self.consulta = _ConsultaAprovadores(categoria_repo, resolvedores)
        self.ciclo_vida = ciclo_vida
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: DecidirAprovacaoInputDTO, ator: AtorDTO) -> TicketOutputDTO:
        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)

            aprovacao = self.aprovacao_repo.obter_por_ticket(ticket.id)
            if aprovacao is None:
                raise EntityNotFoundError(
                    f"Chamado {ticket.id} não possui aprovação",
                    entity_type="Aprovacao",
                    entity_id=ticket.id,
                )

            if ator.id not in self.consulta.aprovadores(ticket, aprovacao.modo):
                raise AuthorizationError("Usuário não é aprovador deste chamado")

            aprovacao.decidir(input_dto.aprovar, ator.id, agora, input_dto.observacao)
            self.aprovacao_repo.save(aprovacao)

            ciclo = self.ciclo_repo.obter_ultimo(ticket.id)
            minutos_pausados = 0
            if input_dto.aprovar:
                ticket.transicionar(TicketStatus.EM_ANDAMENTO, agora)
                if ciclo is not None and ciclo.esta_ativo:
                    minutos_pausados = ciclo.retomar(agora)
                    self.ciclo_repo.save(ciclo)
            else:
                ticket.transicionar(TicketStatus.CANCELADO, agora)
                if ciclo is not None and ciclo.resolver(agora):
                    self.ciclo_repo.save(ciclo)

            self.ticket_repo.save(ticket)
            self.uow.publish_event(
                AprovacaoDecididaEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator.id,
                    occurred_at=agora,
                    aprovacao_id=aprovacao.id,
                    status=aprovacao.status.value,
                    minutos_pausados=minutos_pausados,
                )
            )

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_approval",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={"status": aprovacao.status.value, "note": aprovacao.observacao},
            )
        )
        logger.info(f"Aprovação do chamado {ticket.id}: {aprovacao.status.value} por {ator.id}")
        return self.ciclo_vida.saida(ticket, agora, ciclo)


class ObterAprovacaoService:
    """Leitura da aprovação: visível para quem vê o chamado e para os aprovadores."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        aprovacao_repo: AprovacaoRepository,
        categoria_repo: CategoriaRepository,
        resolvedores: Dict[ModoAprovacao, ResolvedorAprovadores],
    ):
        self.ticket_repo = ticket_repo
        self.aprovacao_repo = aprovacao_repo
        self.consulta = _ConsultaAprovadores(categoria_repo, resolvedores)

    def execute(self, ticket_id: str, ator: AtorDTO) -> AprovacaoOutputDTO:
        ticket = _carregar_ticket(self.ticket_repo, ticket_id)
        aprovacao = self.aprovacao_repo.obter_por_ticket(ticket.id)

        aprovadores = set()
        if aprovacao is not None:
            aprovadores = self.consulta.aprovadores(ticket, aprovacao.modo)

        if ator.id not in aprovadores:
            _exigir_acesso(ticket, ator)

        return AprovacaoOutputDTO(
            aprovacao=AprovacaoOutputDTO.aprovacao_to_dict(aprovacao) if aprovacao else None,
            e_aprovador=aprovacao is not None and aprovacao.esta_pendente and ator.id in aprovadores,
            aprovadores_ids=sorted(aprovadores),
        )


class DefinirPrazoResolucaoManualService:
    """
    Use Case: Admin define o prazo de resolução do ciclo ativo.

    O prazo manual vale só para este ciclo: uma reabertura abre ciclo
    novo com prazos da política, e trocas de prioridade não o alteram.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        ciclo_repo: CicloSlaRepository,
        ciclo_vida: CicloDeVidaTicket,
        auditoria: AuditoriaSink,
        relogio: Relogio,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.ciclo_repo = ciclo_repo
        self.ciclo_vida = ciclo_vida
        self.auditoria = auditoria
        self.relogio = relogio
        self.uow = uow

    def execute(self, input_dto: DefinirPrazoManualInputDTO, ator: AtorDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Chamado sem ciclo de SLA
            BusinessRuleViolationError: Último ciclo já encerrado
        """
        ator.exigir_admin()
        if input_dto.resolucao_ate is None:
            raise ValidationError("Prazo é obrigatório", field="resolucao_ate")

        with self.uow:
            agora = self.relogio.agora()
            ticket = _carregar_ticket(self.ticket_repo, input_dto.ticket_id, para_atualizacao=True)

            ciclo = self.ciclo_repo.obter_ultimo(ticket.id)
            if ciclo is None:
                raise EntityNotFoundError(
                    f"Chamado {ticket.id} não possui ciclo de SLA",
                    entity_type="CicloSla",
                    entity_id=ticket.id,
                )

            ciclo.definir_prazo_manual(input_dto.resolucao_ate, ator.id, agora, input_dto.motivo)
            self.ciclo_repo.save(ciclo)
            self.uow.publish_event(
                PrazoResolucaoAlteradoEvent(
                    aggregate_id=ticket.id,
                    ator_id=ator.id,
                    occurred_at=agora,
                    numero_ciclo=ciclo.numero_ciclo,
                    resolucao_ate=ciclo.resolucao_ate.isoformat(),
                    motivo=ciclo.motivo_prazo_manual,
                )
            )

        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="ticket_sla_deadline",
                alvo_tipo="ticket",
                alvo_id=ticket.id,
                metadados={
                    "cycleNumber": ciclo.numero_ciclo,
                    "resolutionDueAt": ciclo.resolucao_ate.isoformat(),
                    "reason": ciclo.motivo_prazo_manual,
                },
            )
        )
        return self.ciclo_vida.saida(ticket, agora, ciclo)


class ObterTicketService:

    def __init__(self, ticket_repo: TicketRepository, ciclo_vida: CicloDeVidaTicket, relogio: Relogio):
        self.ticket_repo = ticket_repo
        self.ciclo_vida = ciclo_vida
        self.relogio = relogio

    def execute(self, ticket_id: str, ator: AtorDTO) -> TicketOutputDTO:
        ticket = _carregar_ticket(self.ticket_repo, ticket_id)
        _exigir_acesso(ticket, ator)
        return self.ciclo_vida.saida(ticket, self.relogio.agora())


class ListarTicketsService:
    """Chamados visíveis para o ator, opcionalmente filtrados por status."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, ator: AtorDTO, status: Optional[str] = None) -> List[TicketListItemDTO]:
        filtro = TicketStatus.from_string(status) if status else None
        tickets = self.ticket_repo.list_visiveis(ator.id, ator.e_admin, filtro)
        return [TicketListItemDTO.from_entity(t) for t in tickets]

"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter Entity → campos do Model (para persistência)
- Converter Model → Entity (para uso no Core)
- Converter DomainEvent → TicketEventoModel (para Event Store)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Any, Dict, List

from intranet.core.aprovacoes.entities import AprovacaoEntity, ModoAprovacao, StatusAprovacao
from intranet.core.notificacoes.entities import NotificacaoEntity
from intranet.core.shared.events import DomainEvent
from intranet.core.sla.entities import CicloSlaEntity, Prioridade, SlaPoliticaEntity
from intranet.core.tickets.entities import (
    AnexoEntity,
    CategoriaEntity,
    ComentarioEntity,
    TicketEntity,
    TicketStatus,
)

from .models import (
    NotificacaoModel,
    SlaCicloModel,
    SlaPoliticaModel,
    TicketAnexoModel,
    TicketAprovacaoModel,
    TicketCategoriaModel,
    TicketComentarioModel,
    TicketEventoModel,
    TicketModel,
)


class TicketMapper:
    """
    Mapper entre TicketEntity e TicketModel.

    Responsáveis ficam em tabela própria; `to_entity` espera o
    prefetch de `responsaveis` para não gerar N+1.
    """

    @staticmethod
    def to_model_data(entity: TicketEntity) -> Dict[str, Any]:
        """Campos para `update_or_create(defaults=...)`."""
        return {
            'titulo': entity.titulo,
            'descricao': entity.descricao,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'setor_solicitante_id': entity.setor_solicitante_id,
            'setor_destino_id': entity.setor_destino_id,
            'categoria_id': entity.categoria_id,
            'criador_id': entity.criador_id,
            'tags': list(entity.tags),
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
            'fechado_em': entity.fechado_em,
        }

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            titulo=model.titulo,
            descricao=model.descricao,
            status=TicketStatus(model.status),
            prioridade=Prioridade(model.prioridade),
            setor_solicitante_id=model.setor_solicitante_id,
            setor_destino_id=model.setor_destino_id,
            categoria_id=model.categoria_id,
            criador_id=model.criador_id,
            responsaveis_ids=[r.usuario_id for r in model.responsaveis.all()],
            tags=list(model.tags) if model.tags else [],
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            fechado_em=model.fechado_em,
        )

    @staticmethod
    def to_entity_list(models: List[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(m) for m in models]


class CategoriaMapper:

    @staticmethod
    def to_model(entity: CategoriaEntity) -> TicketCategoriaModel:
        return TicketCategoriaModel(
            id=entity.id,
            nome=entity.nome,
            requer_aprovacao=entity.requer_aprovacao,
            modo_aprovacao=entity.modo_aprovacao.value if entity.modo_aprovacao else None,
            aprovadores_ids=list(entity.aprovadores_ids),
            ativa=entity.ativa,
        )

    @staticmethod
    def to_entity(model: TicketCategoriaModel) -> CategoriaEntity:
        return CategoriaEntity(
            id=model.id,
            nome=model.nome,
            requer_aprovacao=model.requer_aprovacao,
            modo_aprovacao=ModoAprovacao(model.modo_aprovacao) if model.modo_aprovacao else None,
            aprovadores_ids=tuple(model.aprovadores_ids or ()),
            ativa=model.ativa,
        )


class ComentarioMapper:

    @staticmethod
    def to_model(entity: ComentarioEntity) -> TicketComentarioModel:
        return TicketComentarioModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            autor_id=entity.autor_id,
            corpo=entity.corpo,
            interno=entity.interno,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: TicketComentarioModel) -> ComentarioEntity:
        return ComentarioEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            autor_id=model.autor_id,
            corpo=model.corpo,
            interno=model.interno,
            criado_em=model.criado_em,
        )


class AnexoMapper:

    @staticmethod
    def to_model(entity: AnexoEntity) -> TicketAnexoModel:
        return TicketAnexoModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            autor_id=entity.autor_id,
            nome_arquivo=entity.nome_arquivo,
            caminho=entity.caminho,
            tamanho_bytes=entity.tamanho_bytes,
            content_type=entity.content_type,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: TicketAnexoModel) -> AnexoEntity:
        return AnexoEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            autor_id=model.autor_id,
            nome_arquivo=model.nome_arquivo,
            caminho=model.caminho,
            tamanho_bytes=model.tamanho_bytes,
            content_type=model.content_type,
            criado_em=model.criado_em,
        )


class AprovacaoMapper:

    @staticmethod
    def to_model_data(entity: AprovacaoEntity) -> Dict[str, Any]:
        return {
            'ticket_id': entity.ticket_id,
            'modo': entity.modo.value,
            'status': entity.status.value,
            'observacao': entity.observacao,
            'decidido_por_id': entity.decidido_por_id,
            'decidido_em': entity.decidido_em,
            'solicitado_em': entity.solicitado_em,
        }

    @staticmethod
    def to_entity(model: TicketAprovacaoModel) -> AprovacaoEntity:
        return AprovacaoEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            modo=ModoAprovacao(model.modo),
            status=StatusAprovacao(model.status),
            observacao=model.observacao,
            decidido_por_id=model.decidido_por_id,
            decidido_em=model.decidido_em,
            solicitado_em=model.solicitado_em,
        )


class SlaPoliticaMapper:

    @staticmethod
    def to_model_data(entity: SlaPoliticaEntity) -> Dict[str, Any]:
        return {
            'nome': entity.nome,
            'prioridade': entity.prioridade.value,
            'minutos_primeira_resposta': entity.minutos_primeira_resposta,
            'minutos_resolucao': entity.minutos_resolucao,
            'ativa': entity.ativa,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: SlaPoliticaModel) -> SlaPoliticaEntity:
        return SlaPoliticaEntity(
            id=model.id,
            nome=model.nome,
            prioridade=Prioridade(model.prioridade),
            minutos_primeira_resposta=model.minutos_primeira_resposta,
            minutos_resolucao=model.minutos_resolucao,
            ativa=model.ativa,
            atualizado_em=model.atualizado_em,
        )


class CicloSlaMapper:

    CAMPOS = (
        'aberto_em',
        'primeira_resposta_ate',
        'primeira_resposta_em',
        'primeira_resposta_violada',
        'resolucao_ate',
        'resolvido_em',
        'resolucao_violada',
        'pausado_em',
        'minutos_pausados',
        'prazo_manual',
        'motivo_prazo_manual',
        'prazo_manual_por_id',
        'prazo_manual_em',
    )

    @staticmethod
    def to_model(entity: CicloSlaEntity) -> SlaCicloModel:
        return SlaCicloModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            numero_ciclo=entity.numero_ciclo,
            **CicloSlaMapper.to_model_data(entity),
        )

    @staticmethod
    def to_model_data(entity: CicloSlaEntity) -> Dict[str, Any]:
        return {campo: getattr(entity, campo) for campo in CicloSlaMapper.CAMPOS}

    @staticmethod
    def to_entity(model: SlaCicloModel) -> CicloSlaEntity:
        return CicloSlaEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            numero_ciclo=model.numero_ciclo,
            **{campo: getattr(model, campo) for campo in CicloSlaMapper.CAMPOS},
        )


class NotificacaoMapper:

    @staticmethod
    def to_model(entity: NotificacaoEntity) -> NotificacaoModel:
        return NotificacaoModel(
            id=entity.id,
            usuario_id=entity.usuario_id,
            tipo=entity.tipo,
            titulo=entity.titulo,
            mensagem=entity.mensagem,
            link_url=entity.link_url,
            dados=dict(entity.dados),
            lida=entity.lida,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: NotificacaoModel) -> NotificacaoEntity:
        return NotificacaoEntity(
            id=model.id,
            usuario_id=model.usuario_id,
            tipo=model.tipo,
            titulo=model.titulo,
            mensagem=model.mensagem,
            link_url=model.link_url,
            dados=dict(model.dados or {}),
            lida=model.lida,
            criado_em=model.criado_em,
        )


class DomainEventMapper:
    """Mapper para Domain Events → Event Store."""

    @staticmethod
    def to_model(event: DomainEvent, sequence: int = 0) -> TicketEventoModel:
        dados = event.to_dict()
        return TicketEventoModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=dados['data'],
            version=event.version,
            sequence=sequence,
            ator_id=event.ator_id,
            occurred_at=event.occurred_at,
        )

    @staticmethod
    def to_dict(model: TicketEventoModel) -> Dict[str, Any]:
        return {
            'event_id': model.event_id,
            'event_type': model.event_type,
            'aggregate_type': model.aggregate_type,
            'aggregate_id': model.aggregate_id,
            'ator_id': model.ator_id,
            'sequence': model.sequence,
            'occurred_at': model.occurred_at.isoformat(),
            'version': model.version,
            'data': model.event_data,
        }

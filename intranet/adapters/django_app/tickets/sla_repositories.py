"""
Repositórios Django de SLA e Notificações.

Implementam os ports de intranet/core/sla/ports.py e
intranet/core/notificacoes/ports.py.

As inserções que dependem de restrição única rodam num savepoint
próprio (`transaction.atomic()`), para que a violação não quebre a
transação externa do Unit of Work.
"""

from typing import List, Optional
import logging

from django.db import IntegrityError, transaction

from intranet.core.notificacoes.entities import NotificacaoEntity
from intranet.core.shared.exceptions import ConcurrencyError
from intranet.core.sla.entities import (
    CicloSlaEntity,
    Prioridade,
    SlaPoliticaEntity,
    TipoAlertaSla,
)

from .mappers import CicloSlaMapper, NotificacaoMapper, SlaPoliticaMapper
from .models import (
    ConfiguracaoNotificacaoModel,
    NotificacaoModel,
    SlaAlertaDedupModel,
    SlaCicloModel,
    SlaPoliticaModel,
)

logger = logging.getLogger(__name__)


class DjangoSlaPoliticaRepository:

    def get_ativa_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        model = SlaPoliticaModel.objects.filter(prioridade=prioridade.value, ativa=True).first()
        return SlaPoliticaMapper.to_entity(model) if model else None

    def get_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        model = SlaPoliticaModel.objects.filter(prioridade=prioridade.value).first()
        return SlaPoliticaMapper.to_entity(model) if model else None

    def list_all(self) -> List[SlaPoliticaEntity]:
        return [SlaPoliticaMapper.to_entity(m) for m in SlaPoliticaModel.objects.all()]

    def save(self, politica: SlaPoliticaEntity) -> None:
        """Upsert; a prioridade é única, então a política é localizada antes pelo caso de uso."""
        SlaPoliticaModel.objects.update_or_create(
            id=politica.id,
            defaults=SlaPoliticaMapper.to_model_data(politica),
        )
        logger.info(f"SLA policy saved: {politica.prioridade.value}")


class DjangoCicloSlaRepository:
    """
    Ciclos de SLA com histórico append-only.

    `adicionar` só insere; a restrição (ticket, numero_ciclo) transforma
    a segunda reabertura concorrente em ConcurrencyError.
    """

    def adicionar(self, ciclo: CicloSlaEntity) -> None:
        try:
            with transaction.atomic():
                CicloSlaMapper.to_model(ciclo).save(force_insert=True)
        except IntegrityError as e:
            raise ConcurrencyError(
                f"Ciclo {ciclo.numero_ciclo} já existe para o chamado {ciclo.ticket_id}"
            ) from e
        logger.debug(f"SLA cycle created: {ciclo.ticket_id} #{ciclo.numero_ciclo}")

    def save(self, ciclo: CicloSlaEntity) -> None:
        atualizados = SlaCicloModel.objects.filter(id=ciclo.id).update(
            **CicloSlaMapper.to_model_data(ciclo)
        )
        if not atualizados:
            self.adicionar(ciclo)

    def obter_ultimo(self, ticket_id: str) -> Optional[CicloSlaEntity]:
        model = (
            SlaCicloModel.objects
            .filter(ticket_id=ticket_id)
            .order_by('-numero_ciclo')
            .first()
        )
        return CicloSlaMapper.to_entity(model) if model else None

    def listar_por_ticket(self, ticket_id: str) -> List[CicloSlaEntity]:
        models = SlaCicloModel.objects.filter(ticket_id=ticket_id).order_by('numero_ciclo')
        return [CicloSlaMapper.to_entity(m) for m in models]


class DjangoAlertaDedupRepository:

    def inserir_se_ausente(
        self,
        ticket_id: str,
        numero_ciclo: int,
        tipo: TipoAlertaSla,
    ) -> bool:
        try:
            with transaction.atomic():
                SlaAlertaDedupModel.objects.create(
                    ticket_id=ticket_id,
                    numero_ciclo=numero_ciclo,
                    tipo_alerta=tipo.value,
                )
        except IntegrityError:
            logger.debug(f"Alert already fired: {ticket_id} #{numero_ciclo} {tipo.value}")
            return False
        return True


class DjangoNotificacaoRepository:

    def inserir_lote(self, notificacoes: List[NotificacaoEntity]) -> None:
        if not notificacoes:
            return
        NotificacaoModel.objects.bulk_create(
            [NotificacaoMapper.to_model(n) for n in notificacoes]
        )
        logger.debug(f"{len(notificacoes)} notifications created")

    def listar_por_usuario(self, usuario_id: str) -> List[NotificacaoEntity]:
        models = NotificacaoModel.objects.filter(usuario_id=usuario_id).order_by('-criado_em')
        return [NotificacaoMapper.to_entity(m) for m in models]


class DjangoConfiguracaoNotificacaoRepository:
    """Tipo sem registro conta como habilitado."""

    def esta_habilitada(self, tipo: str) -> bool:
        habilitada = (
            ConfiguracaoNotificacaoModel.objects
            .filter(tipo=tipo)
            .values_list('habilitada', flat=True)
            .first()
        )
        return True if habilitada is None else habilitada

    def definir(self, tipo: str, habilitada: bool) -> None:
        ConfiguracaoNotificacaoModel.objects.update_or_create(
            tipo=tipo,
            defaults={'habilitada': habilitada},
        )
        logger.info(f"Notification setting {tipo} = {habilitada}")

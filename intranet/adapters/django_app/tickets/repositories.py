"""
Repositórios Django para persistência de Chamados.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar os protocols de intranet/core/tickets/ports.py,
  intranet/core/aprovacoes/ports.py e intranet/core/shared/identidade.py
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Otimizar queries (select_related, prefetch_related)

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import Any, Dict, Iterable, List, Optional, Set
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Max, Q

from intranet.core.aprovacoes.entities import AprovacaoEntity
from intranet.core.shared.auditoria import EntradaAuditoria
from intranet.core.shared.events import DomainEvent
from intranet.core.shared.exceptions import ConcurrencyError
from intranet.core.shared.identidade import PAPEL_ADMIN, PAPEL_COORDENADOR
from intranet.core.shared.interfaces import EventStore
from intranet.core.tickets.entities import (
    AnexoEntity,
    CategoriaEntity,
    ComentarioEntity,
    TicketEntity,
    TicketStatus,
)

from .mappers import (
    AnexoMapper,
    AprovacaoMapper,
    CategoriaMapper,
    ComentarioMapper,
    DomainEventMapper,
    TicketMapper,
)
from .models import (
    MembroSetorModel,
    SetorModel,
    TicketAnexoModel,
    TicketAprovacaoModel,
    TicketCategoriaModel,
    TicketComentarioModel,
    TicketEventoModel,
    TicketModel,
    TicketResponsavelModel,
)

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()

        # Criar / atualizar
        repo.save(ticket_entity)

        # Buscar travando a linha (dentro de `with uow:`)
        ticket = repo.get_by_id_para_atualizacao("uuid-here")

        # Varredura de SLA
        tickets = repo.list_by_status_in(STATUS_ATIVOS)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def _queryset(self):
        return TicketModel.objects.prefetch_related('responsaveis')

    def save(self, ticket: TicketEntity) -> None:
        """
        Persiste chamado (create ou update) e substitui os responsáveis.

        Note:
            Usa update_or_create para atomicidade
        """
        logger.debug(f"Saving ticket: {ticket.id}")

        model, _ = TicketModel.objects.update_or_create(
            id=ticket.id,
            defaults=self._mapper.to_model_data(ticket),
        )

        atuais = list(model.responsaveis.values_list('usuario_id', flat=True))
        if atuais != list(ticket.responsaveis_ids):
            model.responsaveis.all().delete()
            TicketResponsavelModel.objects.bulk_create([
                TicketResponsavelModel(ticket=model, usuario_id=usuario_id, ordem=ordem)
                for ordem, usuario_id in enumerate(ticket.responsaveis_ids)
            ])

        logger.info(f"Ticket saved: {ticket.id}")

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        try:
            model = self._queryset().get(id=ticket_id)
            return self._mapper.to_entity(model)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None

    def get_by_id_para_atualizacao(self, ticket_id: str) -> Optional[TicketEntity]:
        """
        Busca com `SELECT ... FOR UPDATE`.

        Serializa transições concorrentes do mesmo chamado; precisa
        ser chamado dentro de uma transação.
        """
        try:
            model = TicketModel.objects.select_for_update().get(id=ticket_id)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    def list_by_status_in(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        valores = [s.value for s in statuses]
        models = self._queryset().filter(status__in=valores).order_by('criado_em')
        return self._mapper.to_entity_list(list(models))

    def list_visiveis(
        self,
        usuario_id: str,
        e_admin: bool,
        status: Optional[TicketStatus] = None,
    ) -> List[TicketEntity]:
        queryset = self._queryset()
        if not e_admin:
            queryset = queryset.filter(
                Q(criador_id=usuario_id) | Q(responsaveis__usuario_id=usuario_id)
            ).distinct()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return self._mapper.to_entity_list(list(queryset.order_by('-criado_em')))


class DjangoComentarioRepository:

    def save(self, comentario: ComentarioEntity) -> None:
        ComentarioMapper.to_model(comentario).save()
        logger.debug(f"Comment saved: {comentario.id} on ticket {comentario.ticket_id}")

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[ComentarioEntity]:
        queryset = TicketComentarioModel.objects.filter(ticket_id=ticket_id)
        if not incluir_internos:
            queryset = queryset.filter(interno=False)
        return [ComentarioMapper.to_entity(m) for m in queryset.order_by('criado_em')]


class DjangoAnexoRepository:

    def save(self, anexo: AnexoEntity) -> None:
        AnexoMapper.to_model(anexo).save()
        logger.debug(f"Attachment saved: {anexo.id} on ticket {anexo.ticket_id}")

    def list_by_ticket(self, ticket_id: str) -> List[AnexoEntity]:
        queryset = TicketAnexoModel.objects.filter(ticket_id=ticket_id).order_by('criado_em')
        return [AnexoMapper.to_entity(m) for m in queryset]


class DjangoCategoriaRepository:

    def get_by_id(self, categoria_id: str) -> Optional[CategoriaEntity]:
        try:
            return CategoriaMapper.to_entity(TicketCategoriaModel.objects.get(id=categoria_id))
        except TicketCategoriaModel.DoesNotExist:
            return None

    def save(self, categoria: CategoriaEntity) -> None:
        CategoriaMapper.to_model(categoria).save()
        logger.info(f"Category saved: {categoria.nome}")


class DjangoAprovacaoRepository:
    """Uma aprovação por entrada no portão; vale a mais recente."""

    def save(self, aprovacao: AprovacaoEntity) -> None:
        TicketAprovacaoModel.objects.update_or_create(
            id=aprovacao.id,
            defaults=AprovacaoMapper.to_model_data(aprovacao),
        )
        logger.debug(f"Approval saved: {aprovacao.id} ({aprovacao.status.value})")

    def obter_por_ticket(self, ticket_id: str) -> Optional[AprovacaoEntity]:
        model = (
            TicketAprovacaoModel.objects
            .filter(ticket_id=ticket_id)
            .order_by('-solicitado_em')
            .first()
        )
        return AprovacaoMapper.to_entity(model) if model else None


class DjangoDiretorioUsuarios:
    """
    Diretório de usuários sobre `django.contrib.auth` e os papéis de setor.

    Admin global = usuário ativo com `is_staff`. IDs circulam como
    string do `pk`.
    """

    def __init__(self):
        self._user_model = get_user_model()

    def _ativos(self):
        return self._user_model.objects.filter(is_active=True)

    def listar_admins_ativos(self) -> List[str]:
        ids = self._ativos().filter(is_staff=True).values_list('pk', flat=True)
        return sorted(str(pk) for pk in ids)

    def _por_papel(self, setor_id: str, papel: str) -> List[str]:
        membros = set(
            MembroSetorModel.objects
            .filter(setor_id=setor_id, papel=papel)
            .values_list('usuario_id', flat=True)
        )
        return sorted(self.filtrar_usuarios_ativos(membros))

    def listar_coordenadores_setor(self, setor_id: str) -> List[str]:
        return self._por_papel(setor_id, PAPEL_COORDENADOR)

    def listar_admins_setor(self, setor_id: str) -> List[str]:
        return self._por_papel(setor_id, PAPEL_ADMIN)

    def obter_setor_id_por_nome(self, nome: str) -> Optional[str]:
        setor = SetorModel.objects.filter(nome=nome, ativo=True).first()
        return setor.id if setor else None

    def filtrar_usuarios_ativos(self, usuario_ids: Iterable[str]) -> Set[str]:
        ids = [str(u) for u in usuario_ids]
        if not ids:
            return set()
        return {str(pk) for pk in self._ativos().filter(pk__in=ids).values_list('pk', flat=True)}


class DjangoEventStore(EventStore):
    """
    Event Store usando Django ORM.

    Persiste Domain Events para:
    - Linha do tempo do chamado
    - Auditoria
    - Replay
    """

    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Raises:
            ConcurrencyError: Sequência já usada por outra transação
        """
        model = DomainEventMapper.to_model(event=event, sequence=sequence)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            raise ConcurrencyError(
                f"Sequência {sequence} já registrada para {event.aggregate_id}"
            ) from e

        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def ultima_sequencia(self, aggregate_id: str) -> int:
        resultado = TicketEventoModel.objects.filter(aggregate_id=aggregate_id).aggregate(
            ultima=Max('sequence')
        )
        return resultado['ultima'] or 0

    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0,
    ) -> List[Dict[str, Any]]:
        events = (
            TicketEventoModel.objects
            .filter(aggregate_id=aggregate_id, sequence__gte=since_sequence)
            .order_by('sequence')
        )
        return [DomainEventMapper.to_dict(e) for e in events]


class LoggingAuditoriaSink:
    """
    Trilha de auditoria no logger `intranet.auditoria`.

    O destino (arquivo, syslog, coletor) é decidido no LOGGING do settings.
    """

    def __init__(self, logger_name: str = "intranet.auditoria"):
        self._logger = logging.getLogger(logger_name)

    def registrar(self, entrada: EntradaAuditoria) -> None:
        self._logger.info(
            f"{entrada.acao} {entrada.alvo_tipo}:{entrada.alvo_id} por {entrada.ator_id}",
            extra={
                'acao': entrada.acao,
                'ator_id': entrada.ator_id,
                'alvo_tipo': entrada.alvo_tipo,
                'alvo_id': entrada.alvo_id,
                'metadados': dict(entrada.metadados),
            },
        )

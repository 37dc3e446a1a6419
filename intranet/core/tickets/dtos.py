"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de modelos internos (entidades) para camadas externas.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada (da API)
- Output DTOs: Formatam dados para resposta
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from intranet.core.aprovacoes.entities import AprovacaoEntity
from intranet.core.sla.dtos import CicloSlaOutputDTO

from .entities import AnexoEntity, ComentarioEntity, TicketEntity


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar chamado.

    O setor de destino não vem do usuário: é o setor configurado em
    TICKETS_TARGET_SECTOR_NAME.

    Attributes:
        titulo: Título do chamado
        descricao: Descrição detalhada
        prioridade: Nome da prioridade (default MEDIA)
        setor_solicitante_id: Setor de quem abre
        categoria_id: Categoria (pode exigir aprovação)
        tags: Tags opcionais
    """

    titulo: str
    descricao: str
    prioridade: str = "MEDIA"
    setor_solicitante_id: Optional[str] = None
    categoria_id: Optional[str] = None
    tags: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    Atualização combinada de admin: qualquer subconjunto de status,
    prioridade e categoria.

    `alterar_categoria` distingue "não mexer" de "remover categoria".
    """

    ticket_id: str
    status: Optional[str] = None
    prioridade: Optional[str] = None
    categoria_id: Optional[str] = None
    alterar_categoria: bool = False


@dataclass(frozen=True)
class DefinirResponsaveisInputDTO:

    ticket_id: str
    usuario_ids: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class AdicionarComentarioInputDTO:

    ticket_id: str
    corpo: str
    interno: bool = False


@dataclass(frozen=True)
class AdicionarAnexoInputDTO:
    """Metadados de um arquivo já armazenado pelo serviço de arquivos."""

    ticket_id: str
    nome_arquivo: str
    caminho: str
    tamanho_bytes: int
    content_type: Optional[str] = None


@dataclass(frozen=True)
class DecidirAprovacaoInputDTO:
    """
    Attributes:
        aprovar: True aprova, False rejeita
        observacao: Obrigatória na rejeição
    """

    ticket_id: str
    aprovar: bool
    observacao: Optional[str] = None


@dataclass(frozen=True)
class DefinirPrazoManualInputDTO:

    ticket_id: str
    resolucao_ate: datetime
    motivo: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do chamado.

    Inclui o ciclo de SLA corrente e o estado resumido do SLA
    (OK, EM_RISCO, VIOLADO, PAUSADO, ENCERRADO).
    """

    id: str
    titulo: str
    descricao: str
    status: str
    prioridade: str
    setor_solicitante_id: Optional[str]
    setor_destino_id: str
    categoria_id: Optional[str]
    criador_id: str
    responsaveis_ids: List[str]
    tags: List[str]
    criado_em: datetime
    atualizado_em: datetime
    fechado_em: Optional[datetime]
    ciclo_sla: Optional[CicloSlaOutputDTO] = None
    estado_sla: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        entity: TicketEntity,
        ciclo_sla: Optional[CicloSlaOutputDTO] = None,
        estado_sla: Optional[str] = None,
    ) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            titulo=entity.titulo,
            descricao=entity.descricao,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            setor_solicitante_id=entity.setor_solicitante_id,
            setor_destino_id=entity.setor_destino_id,
            categoria_id=entity.categoria_id,
            criador_id=entity.criador_id,
            responsaveis_ids=list(entity.responsaveis_ids),
            tags=list(entity.tags),
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            fechado_em=entity.fechado_em,
            ciclo_sla=ciclo_sla,
            estado_sla=estado_sla,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "status": self.status,
            "prioridade": self.prioridade,
            "setor_solicitante_id": self.setor_solicitante_id,
            "setor_destino_id": self.setor_destino_id,
            "categoria_id": self.categoria_id,
            "criador_id": self.criador_id,
            "responsaveis_ids": self.responsaveis_ids,
            "tags": self.tags,
            "criado_em": _iso(self.criado_em),
            "atualizado_em": _iso(self.atualizado_em),
            "fechado_em": _iso(self.fechado_em),
            "ciclo_sla": self.ciclo_sla.to_dict() if self.ciclo_sla else None,
            "estado_sla": self.estado_sla,
        }


@dataclass
class TicketListItemDTO:
    """DTO enxuto para listagens."""

    id: str
    titulo: str
    status: str
    prioridade: str
    criador_id: str
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketListItemDTO":
        return cls(
            id=entity.id,
            titulo=entity.titulo,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            criador_id=entity.criador_id,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titulo": self.titulo,
            "status": self.status,
            "prioridade": self.prioridade,
            "criador_id": self.criador_id,
            "criado_em": _iso(self.criado_em),
        }


@dataclass
class ComentarioOutputDTO:

    id: str
    ticket_id: str
    autor_id: str
    corpo: str
    interno: bool
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: ComentarioEntity) -> "ComentarioOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            autor_id=entity.autor_id,
            corpo=entity.corpo,
            interno=entity.interno,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "autor_id": self.autor_id,
            "corpo": self.corpo,
            "interno": self.interno,
            "criado_em": _iso(self.criado_em),
        }


@dataclass
class AnexoOutputDTO:

    id: str
    ticket_id: str
    nome_arquivo: str
    caminho: str
    tamanho_bytes: int
    content_type: Optional[str]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: AnexoEntity) -> "AnexoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            nome_arquivo=entity.nome_arquivo,
            caminho=entity.caminho,
            tamanho_bytes=entity.tamanho_bytes,
            content_type=entity.content_type,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "nome_arquivo": self.nome_arquivo,
            "caminho": self.caminho,
            "tamanho_bytes": self.tamanho_bytes,
            "content_type": self.content_type,
            "criado_em": _iso(self.criado_em),
        }


@dataclass
class AprovacaoOutputDTO:
    """
    Leitura da aprovação de um chamado.

    Attributes:
        aprovacao: Dados da aprovação mais recente (None se nunca houve)
        e_aprovador: Se o ator pode decidir agora
        aprovadores_ids: Aprovadores resolvidos para o modo da aprovação
    """

    aprovacao: Optional[dict]
    e_aprovador: bool
    aprovadores_ids: List[str]

    @staticmethod
    def aprovacao_to_dict(entity: AprovacaoEntity) -> dict:
        return {
            "id": entity.id,
            "ticket_id": entity.ticket_id,
            "modo": entity.modo.value,
            "status": entity.status.value,
            "observacao": entity.observacao,
            "decidido_por_id": entity.decidido_por_id,
            "decidido_em": _iso(entity.decidido_em),
            "solicitado_em": _iso(entity.solicitado_em),
        }

    def to_dict(self) -> dict:
        return {
            "aprovacao": self.aprovacao,
            "e_aprovador": self.e_aprovador,
            "aprovadores_ids": self.aprovadores_ids,
        }

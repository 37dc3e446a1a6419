"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas aos chamados do helpdesk interno.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um chamado
- TRANSICOES: Tabela explícita de transições permitidas
- ComentarioEntity / AnexoEntity: Interações no chamado
- CategoriaEntity: Configuração de aprovação por categoria

Regras de Negócio Encapsuladas:
- Validação de dados na criação
- Transições de status controladas pela tabela TRANSICOES
- RESOLVIDO/CANCELADO → ABERTO é reabertura
- Visibilidade: criador, responsáveis e admins
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, List, Optional, Set, Tuple
import uuid

from intranet.core.aprovacoes.entities import ModoAprovacao
from intranet.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from intranet.core.sla.entities import Prioridade


def _agora_utc() -> datetime:
    return datetime.now(timezone.utc)


class TicketStatus(Enum):
    """
    Estados possíveis de um chamado.

    Fluxo de Estados:
        ABERTO → EM_ANDAMENTO → AGUARDANDO_USUARIO | AGUARDANDO_APROVACAO
                                        ↓
                              RESOLVIDO | CANCELADO
                                        ↓
                              ABERTO (reabertura)
    """

    ABERTO = "ABERTO"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    AGUARDANDO_USUARIO = "AGUARDANDO_USUARIO"
    AGUARDANDO_APROVACAO = "AGUARDANDO_APROVACAO"
    RESOLVIDO = "RESOLVIDO"
    CANCELADO = "CANCELADO"

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Raises:
            ValidationError: Se valor inválido
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper().replace(" ", "_")]
        except KeyError:
            raise ValidationError(f"Status inválido: {value}", field="status")

    @property
    def e_ativo(self) -> bool:
        """Estados varridos pelo escalonamento de SLA."""
        return self in STATUS_ATIVOS

    @property
    def e_terminal(self) -> bool:
        return self in (TicketStatus.RESOLVIDO, TicketStatus.CANCELADO)


STATUS_ATIVOS: FrozenSet[TicketStatus] = frozenset({
    TicketStatus.ABERTO,
    TicketStatus.EM_ANDAMENTO,
    TicketStatus.AGUARDANDO_USUARIO,
    TicketStatus.AGUARDANDO_APROVACAO,
})


# status de origem -> status de destino permitidos
TRANSICOES: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.ABERTO: frozenset({
        TicketStatus.EM_ANDAMENTO,
        TicketStatus.AGUARDANDO_USUARIO,
        TicketStatus.AGUARDANDO_APROVACAO,
        TicketStatus.RESOLVIDO,
        TicketStatus.CANCELADO,
    }),
    TicketStatus.EM_ANDAMENTO: frozenset({
        TicketStatus.AGUARDANDO_USUARIO,
        TicketStatus.AGUARDANDO_APROVACAO,
        TicketStatus.RESOLVIDO,
        TicketStatus.CANCELADO,
    }),
    TicketStatus.AGUARDANDO_USUARIO: frozenset({
        TicketStatus.ABERTO,
        TicketStatus.EM_ANDAMENTO,
        TicketStatus.RESOLVIDO,
        TicketStatus.CANCELADO,
    }),
    TicketStatus.AGUARDANDO_APROVACAO: frozenset({
        TicketStatus.EM_ANDAMENTO,
        TicketStatus.CANCELADO,
    }),
    TicketStatus.RESOLVIDO: frozenset({TicketStatus.ABERTO}),
    TicketStatus.CANCELADO: frozenset({TicketStatus.ABERTO}),
}


def transicao_permitida(origem: TicketStatus, destino: TicketStatus) -> bool:
    return destino in TRANSICOES[origem]


@dataclass
class CategoriaEntity:
    """
    Categoria de chamado.

    Attributes:
        requer_aprovacao: Se chamados da categoria passam pelo portão de aprovação
        modo_aprovacao: Quem aprova (ver ModoAprovacao)
        aprovadores_ids: Usuários para o modo SPECIFIC_USERS
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    requer_aprovacao: bool = False
    modo_aprovacao: Optional[ModoAprovacao] = None
    aprovadores_ids: Tuple[str, ...] = ()
    ativa: bool = True

    def __post_init__(self):
        if self.requer_aprovacao and self.modo_aprovacao is None:
            self.modo_aprovacao = ModoAprovacao.TI_ADMIN


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Chamado.

    Agregado principal do helpdesk. O ciclo de SLA do chamado vive em
    `intranet.core.sla` e é conduzido pelos casos de uso do ciclo de vida.

    Invariantes:
    - Título entre 3 e 200 caracteres
    - Descrição entre 10 e 5000 caracteres
    - Só transições presentes em TRANSICOES são aceitas
    - fechado_em preenchido somente em RESOLVIDO

    Attributes:
        id: Identificador único (UUID)
        titulo / descricao: Conteúdo do chamado
        status: Estado atual
        prioridade: BAIXA, MEDIA, ALTA ou URGENTE
        setor_solicitante_id: Setor de quem abriu
        setor_destino_id: Setor que atende
        categoria_id: Categoria (pode exigir aprovação)
        criador_id: Usuário que abriu
        responsaveis_ids: Usuários atribuídos
        fechado_em: Momento da resolução

    Example:
        ticket = TicketEntity.criar(
            titulo="VPN não conecta",
            descricao="Erro 809 ao conectar na VPN desde ontem",
            criador_id="user-1",
            setor_destino_id="setor-tech",
            agora=relogio.agora(),
        )
        ticket.transicionar(TicketStatus.EM_ANDAMENTO, relogio.agora())
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    titulo: str = ""
    descricao: str = ""

    status: TicketStatus = TicketStatus.ABERTO
    prioridade: Prioridade = Prioridade.MEDIA

    setor_solicitante_id: Optional[str] = None
    setor_destino_id: str = ""
    categoria_id: Optional[str] = None
    criador_id: str = ""
    responsaveis_ids: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    criado_em: datetime = field(default_factory=_agora_utc)
    atualizado_em: datetime = field(default_factory=_agora_utc)
    fechado_em: Optional[datetime] = None

    TITULO_MIN_LENGTH: ClassVar[int] = 3
    TITULO_MAX_LENGTH: ClassVar[int] = 200
    DESCRICAO_MIN_LENGTH: ClassVar[int] = 10
    DESCRICAO_MAX_LENGTH: ClassVar[int] = 5000

    @classmethod
    def criar(
        cls,
        titulo: str,
        descricao: str,
        criador_id: str,
        setor_destino_id: str,
        agora: datetime,
        prioridade: Prioridade = Prioridade.MEDIA,
        setor_solicitante_id: Optional[str] = None,
        categoria_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar chamado com validações.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_texto(titulo, "titulo", "Título", cls.TITULO_MIN_LENGTH, cls.TITULO_MAX_LENGTH)
        cls._validar_texto(
            descricao, "descricao", "Descrição", cls.DESCRICAO_MIN_LENGTH, cls.DESCRICAO_MAX_LENGTH
        )
        if not criador_id:
            raise ValidationError("Criador é obrigatório", field="criador_id")

        tags_limpas = []
        for tag in tags or []:
            tag_limpa = tag.strip().lower()
            if tag_limpa and tag_limpa not in tags_limpas:
                tags_limpas.append(tag_limpa)

        return cls(
            titulo=titulo.strip(),
            descricao=descricao.strip(),
            criador_id=criador_id,
            setor_destino_id=setor_destino_id,
            setor_solicitante_id=setor_solicitante_id,
            categoria_id=categoria_id,
            prioridade=prioridade,
            status=TicketStatus.ABERTO,
            tags=tags_limpas,
            criado_em=agora,
            atualizado_em=agora,
        )

    @staticmethod
    def _validar_texto(valor: str, campo: str, rotulo: str, minimo: int, maximo: int) -> None:
        if not valor or not valor.strip():
            raise ValidationError(f"{rotulo} é obrigatório", field=campo)

        tamanho = len(valor.strip())
        if tamanho < minimo:
            raise ValidationError(
                f"{rotulo} deve ter pelo menos {minimo} caracteres",
                field=campo,
            )
        if tamanho > maximo:
            raise ValidationError(
                f"{rotulo} deve ter no máximo {maximo} caracteres",
                field=campo,
            )

    def transicionar(self, novo_status: TicketStatus, agora: datetime) -> TicketStatus:
        """
        Altera status validando contra TRANSICOES.

        Resolver preenche fechado_em; reabrir limpa.

        Returns:
            Status anterior

        Raises:
            BusinessRuleViolationError: Se transição inválida
        """
        if not transicao_permitida(self.status, novo_status):
            raise BusinessRuleViolationError(
                f"Transição de {self.status.value} para {novo_status.value} não é permitida",
                rule="transicao_status_invalida",
            )

        anterior = self.status
        self.status = novo_status

        if novo_status == TicketStatus.RESOLVIDO:
            self.fechado_em = agora
        elif novo_status == TicketStatus.ABERTO and anterior.e_terminal:
            self.fechado_em = None

        self.atualizado_em = agora
        return anterior

    def e_reabertura(self, novo_status: TicketStatus) -> bool:
        return self.status.e_terminal and novo_status == TicketStatus.ABERTO

    def alterar_prioridade(self, nova_prioridade: Prioridade, agora: datetime) -> Optional[Prioridade]:
        """
        Troca a prioridade sem recalcular prazos do ciclo ativo.

        Returns:
            Prioridade anterior, ou None se não mudou
        """
        if nova_prioridade == self.prioridade:
            return None
        anterior = self.prioridade
        self.prioridade = nova_prioridade
        self.atualizado_em = agora
        return anterior

    def alterar_categoria(self, categoria_id: Optional[str], agora: datetime) -> bool:
        if categoria_id == self.categoria_id:
            return False
        self.categoria_id = categoria_id
        self.atualizado_em = agora
        return True

    def definir_responsaveis(
        self,
        usuario_ids: List[str],
        agora: datetime,
    ) -> Tuple[List[str], List[str]]:
        """
        Substitui o conjunto de responsáveis.

        Returns:
            (adicionados, removidos), ambos ordenados
        """
        novos: List[str] = []
        for uid in usuario_ids:
            if uid and uid not in novos:
                novos.append(uid)

        atuais: Set[str] = set(self.responsaveis_ids)
        adicionados = sorted(set(novos) - atuais)
        removidos = sorted(atuais - set(novos))

        self.responsaveis_ids = novos
        if adicionados or removidos:
            self.atualizado_em = agora
        return adicionados, removidos

    def pode_ser_acessado_por(self, usuario_id: str, e_admin: bool) -> bool:
        if e_admin:
            return True
        return usuario_id == self.criador_id or usuario_id in self.responsaveis_ids

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"titulo='{self.titulo[:20]}...', "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class ComentarioEntity:
    """
    Comentário em um chamado.

    Comentários internos são visíveis apenas para administradores.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    autor_id: str = ""
    corpo: str = ""
    interno: bool = False
    criado_em: datetime = field(default_factory=_agora_utc)

    CORPO_MAX_LENGTH: ClassVar[int] = 10000

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        autor_id: str,
        corpo: str,
        agora: datetime,
        interno: bool = False,
    ) -> "ComentarioEntity":
        corpo_limpo = (corpo or "").strip()
        if not corpo_limpo:
            raise ValidationError("Comentário não pode ser vazio", field="corpo")
        if len(corpo_limpo) > cls.CORPO_MAX_LENGTH:
            raise ValidationError(
                f"Comentário deve ter no máximo {cls.CORPO_MAX_LENGTH} caracteres",
                field="corpo",
            )
        return cls(
            ticket_id=ticket_id,
            autor_id=autor_id,
            corpo=corpo_limpo,
            interno=interno,
            criado_em=agora,
        )


@dataclass
class AnexoEntity:
    """Metadados de um arquivo anexado (o armazenamento é externo)."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    autor_id: str = ""
    nome_arquivo: str = ""
    caminho: str = ""
    tamanho_bytes: int = 0
    content_type: Optional[str] = None
    criado_em: datetime = field(default_factory=_agora_utc)

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        autor_id: str,
        nome_arquivo: str,
        caminho: str,
        tamanho_bytes: int,
        agora: datetime,
        content_type: Optional[str] = None,
    ) -> "AnexoEntity":
        if not (nome_arquivo or "").strip():
            raise ValidationError("Nome do arquivo é obrigatório", field="nome_arquivo")
        if not (caminho or "").strip():
            raise ValidationError("Caminho do arquivo é obrigatório", field="caminho")
        if tamanho_bytes is None or int(tamanho_bytes) < 0:
            raise ValidationError("Tamanho inválido", field="tamanho_bytes")
        return cls(
            ticket_id=ticket_id,
            autor_id=autor_id,
            nome_arquivo=nome_arquivo.strip(),
            caminho=caminho.strip(),
            tamanho_bytes=int(tamanho_bytes),
            content_type=content_type,
            criado_em=agora,
        )

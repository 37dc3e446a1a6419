"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de chamados.

Tipos de Ports:
- TicketRepository: chamados
- ComentarioRepository / AnexoRepository: interações
- CategoriaRepository: configuração de aprovação

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

import copy
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from .entities import (
    AnexoEntity,
    CategoriaEntity,
    ComentarioEntity,
    TicketEntity,
    TicketStatus,
)


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de chamados.

    Implementações:
    - DjangoTicketRepository (ORM)
    - InMemoryTicketRepository (testes)
    """

    def save(self, ticket: TicketEntity) -> None:
        """Persiste chamado (create ou update), incluindo responsáveis."""
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def get_by_id_para_atualizacao(self, ticket_id: str) -> Optional[TicketEntity]:
        """
        Busca chamado travando a linha até o fim da transação.

        Serializa atualizações concorrentes do mesmo chamado
        (ex: duas reaberturas simultâneas).
        """
        ...

    def list_by_status_in(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        ...

    def list_visiveis(
        self,
        usuario_id: str,
        e_admin: bool,
        status: Optional[TicketStatus] = None,
    ) -> List[TicketEntity]:
        """
        Chamados visíveis para o usuário, mais recentes primeiro.

        Admin vê todos; demais veem os que criaram ou em que são responsáveis.
        """
        ...


@runtime_checkable
class ComentarioRepository(Protocol):

    def save(self, comentario: ComentarioEntity) -> None:
        ...

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[ComentarioEntity]:
        """Comentários em ordem cronológica."""
        ...


@runtime_checkable
class AnexoRepository(Protocol):

    def save(self, anexo: AnexoEntity) -> None:
        ...

    def list_by_ticket(self, ticket_id: str) -> List[AnexoEntity]:
        ...


@runtime_checkable
class CategoriaRepository(Protocol):

    def get_by_id(self, categoria_id: str) -> Optional[CategoriaEntity]:
        ...

    def save(self, categoria: CategoriaEntity) -> None:
        ...


# =============================================================================
# Implementações em memória (testes e desenvolvimento)
# =============================================================================

class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Guarda cópias: alterações numa entidade lida só valem após `save`,
    como num banco real.

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}

    def save(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = copy.deepcopy(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return copy.deepcopy(ticket) if ticket else None

    def get_by_id_para_atualizacao(self, ticket_id: str) -> Optional[TicketEntity]:
        return self.get_by_id(ticket_id)

    def list_by_status_in(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        filtro = set(statuses)
        return [copy.deepcopy(t) for t in self._tickets.values() if t.status in filtro]

    def list_visiveis(
        self,
        usuario_id: str,
        e_admin: bool,
        status: Optional[TicketStatus] = None,
    ) -> List[TicketEntity]:
        tickets = [
            copy.deepcopy(t) for t in self._tickets.values()
            if t.pode_ser_acessado_por(usuario_id, e_admin)
            and (status is None or t.status == status)
        ]
        return sorted(tickets, key=lambda t: t.criado_em, reverse=True)

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        self._tickets.clear()


class InMemoryComentarioRepository:

    def __init__(self):
        self._comentarios: List[ComentarioEntity] = []

    def save(self, comentario: ComentarioEntity) -> None:
        self._comentarios.append(comentario)

    def list_by_ticket(self, ticket_id: str, incluir_internos: bool = True) -> List[ComentarioEntity]:
        return [
            c for c in sorted(self._comentarios, key=lambda c: c.criado_em)
            if c.ticket_id == ticket_id and (incluir_internos or not c.interno)
        ]


class InMemoryAnexoRepository:

    def __init__(self):
        self._anexos: List[AnexoEntity] = []

    def save(self, anexo: AnexoEntity) -> None:
        self._anexos.append(anexo)

    def list_by_ticket(self, ticket_id: str) -> List[AnexoEntity]:
        return [a for a in self._anexos if a.ticket_id == ticket_id]


class InMemoryCategoriaRepository:

    def __init__(self, categorias: Optional[List[CategoriaEntity]] = None):
        self._categorias: Dict[str, CategoriaEntity] = {c.id: c for c in categorias or []}

    def get_by_id(self, categoria_id: str) -> Optional[CategoriaEntity]:
        return self._categorias.get(categoria_id)

    def save(self, categoria: CategoriaEntity) -> None:
        self._categorias[categoria.id] = categoria

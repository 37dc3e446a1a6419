"""
Ports do Domínio de Aprovações.
"""

from typing import Dict, Optional, Protocol, runtime_checkable

from .entities import AprovacaoEntity


@runtime_checkable
class AprovacaoRepository(Protocol):

    def save(self, aprovacao: AprovacaoEntity) -> None:
        ...

    def obter_por_ticket(self, ticket_id: str) -> Optional[AprovacaoEntity]:
        """Aprovação mais recente do chamado, ou None."""
        ...


class InMemoryAprovacaoRepository:

    def __init__(self):
        self._aprovacoes: Dict[str, AprovacaoEntity] = {}

    def save(self, aprovacao: AprovacaoEntity) -> None:
        self._aprovacoes[aprovacao.id] = aprovacao

    def obter_por_ticket(self, ticket_id: str) -> Optional[AprovacaoEntity]:
        do_ticket = [a for a in self._aprovacoes.values() if a.ticket_id == ticket_id]
        if not do_ticket:
            return None
        return do_ticket[-1]

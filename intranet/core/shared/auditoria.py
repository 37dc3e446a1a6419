"""
Auditoria - port de saída para trilha de auditoria.

O núcleo emite entradas como efeito colateral e não depende do
formato de armazenamento. O adapter Django grava em log estruturado.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol, runtime_checkable


@dataclass(frozen=True)
class EntradaAuditoria:
    """
    Attributes:
        ator_id: Quem executou
        acao: Código da ação (ex: "ticket_create")
        alvo_tipo: Tipo do alvo (ex: "ticket")
        alvo_id: ID do alvo
        metadados: Detalhes livres da ação
    """

    ator_id: str
    acao: str
    alvo_tipo: str
    alvo_id: str
    metadados: Dict[str, Any] = field(default_factory=dict)
    registrado_em: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@runtime_checkable
class AuditoriaSink(Protocol):

    def registrar(self, entrada: EntradaAuditoria) -> None:
        ...


class InMemoryAuditoriaSink:

    def __init__(self):
        self.entradas: List[EntradaAuditoria] = []

    def registrar(self, entrada: EntradaAuditoria) -> None:
        self.entradas.append(entrada)

    def acoes(self) -> List[str]:
        return [e.acao for e in self.entradas]

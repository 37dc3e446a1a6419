"""
Ports (Interfaces) do Domínio de Notificações.

- NotificacaoRepository: destino dos registros de notificação
- ConfiguracaoNotificacaoRepository: chave global por tipo de notificação
"""

from typing import Dict, List, Protocol, runtime_checkable

from .entities import NotificacaoEntity


@runtime_checkable
class NotificacaoRepository(Protocol):

    def inserir_lote(self, notificacoes: List[NotificacaoEntity]) -> None:
        ...

    def listar_por_usuario(self, usuario_id: str) -> List[NotificacaoEntity]:
        ...


@runtime_checkable
class ConfiguracaoNotificacaoRepository(Protocol):

    def esta_habilitada(self, tipo: str) -> bool:
        """Tipo sem configuração gravada conta como habilitado."""
        ...

    def definir(self, tipo: str, habilitada: bool) -> None:
        ...


class InMemoryNotificacaoRepository:

    def __init__(self):
        self._notificacoes: List[NotificacaoEntity] = []

    def inserir_lote(self, notificacoes: List[NotificacaoEntity]) -> None:
        self._notificacoes.extend(notificacoes)

    def listar_por_usuario(self, usuario_id: str) -> List[NotificacaoEntity]:
        return [n for n in self._notificacoes if n.usuario_id == usuario_id]

    def list_all(self) -> List[NotificacaoEntity]:
        return list(self._notificacoes)


class InMemoryConfiguracaoNotificacaoRepository:

    def __init__(self, inicial: Dict[str, bool] = None):
        self._config: Dict[str, bool] = dict(inicial or {})

    def esta_habilitada(self, tipo: str) -> bool:
        return self._config.get(tipo, True)

    def definir(self, tipo: str, habilitada: bool) -> None:
        self._config[tipo] = habilitada

"""
Ports (Interfaces) do Domínio de SLA.

Contratos de persistência usados pelo resolvedor de políticas, pelo
ciclo de vida do chamado e pela varredura de escalonamento.

- SlaPoliticaRepository: políticas por prioridade
- CicloSlaRepository: histórico append-only de ciclos por chamado
- AlertaDedupRepository: guarda write-once de alertas por ciclo
"""

from typing import Dict, List, Optional, Protocol, Set, Tuple, runtime_checkable

from intranet.core.shared.exceptions import ConcurrencyError

from .entities import CicloSlaEntity, Prioridade, SlaPoliticaEntity, TipoAlertaSla


@runtime_checkable
class SlaPoliticaRepository(Protocol):

    def get_ativa_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        """Política ativa para a prioridade, ou None."""
        ...

    def get_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        ...

    def list_all(self) -> List[SlaPoliticaEntity]:
        ...

    def save(self, politica: SlaPoliticaEntity) -> None:
        ...


@runtime_checkable
class CicloSlaRepository(Protocol):
    """
    Interface para persistência de ciclos de SLA.

    Implementações devem garantir unicidade de (ticket_id, numero_ciclo):
    `adicionar` de um número já existente lança ConcurrencyError.
    """

    def adicionar(self, ciclo: CicloSlaEntity) -> None:
        """
        Insere um ciclo novo.

        Raises:
            ConcurrencyError: Se já existe ciclo com o mesmo número no chamado
        """
        ...

    def save(self, ciclo: CicloSlaEntity) -> None:
        """Atualiza um ciclo existente."""
        ...

    def obter_ultimo(self, ticket_id: str) -> Optional[CicloSlaEntity]:
        """Ciclo de maior numero_ciclo do chamado."""
        ...

    def listar_por_ticket(self, ticket_id: str) -> List[CicloSlaEntity]:
        """Ciclos do chamado em ordem crescente de número."""
        ...


@runtime_checkable
class AlertaDedupRepository(Protocol):

    def inserir_se_ausente(
        self,
        ticket_id: str,
        numero_ciclo: int,
        tipo: TipoAlertaSla,
    ) -> bool:
        """
        Tenta gravar a guarda do alerta.

        Returns:
            True só quando esta chamada criou o registro
        """
        ...


# =============================================================================
# Implementações em memória (testes e desenvolvimento)
# =============================================================================

class InMemorySlaPoliticaRepository:

    def __init__(self):
        self._politicas: Dict[Prioridade, SlaPoliticaEntity] = {}

    def get_ativa_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        politica = self._politicas.get(prioridade)
        if politica is not None and politica.ativa:
            return politica
        return None

    def get_por_prioridade(self, prioridade: Prioridade) -> Optional[SlaPoliticaEntity]:
        return self._politicas.get(prioridade)

    def list_all(self) -> List[SlaPoliticaEntity]:
        return list(self._politicas.values())

    def save(self, politica: SlaPoliticaEntity) -> None:
        self._politicas[politica.prioridade] = politica


class InMemoryCicloSlaRepository:

    def __init__(self):
        self._ciclos: Dict[Tuple[str, int], CicloSlaEntity] = {}

    def adicionar(self, ciclo: CicloSlaEntity) -> None:
        chave = (ciclo.ticket_id, ciclo.numero_ciclo)
        if chave in self._ciclos:
            raise ConcurrencyError(
                f"Ciclo {ciclo.numero_ciclo} do chamado {ciclo.ticket_id} já existe"
            )
        self._ciclos[chave] = ciclo

    def save(self, ciclo: CicloSlaEntity) -> None:
        self._ciclos[(ciclo.ticket_id, ciclo.numero_ciclo)] = ciclo

    def obter_ultimo(self, ticket_id: str) -> Optional[CicloSlaEntity]:
        ciclos = self.listar_por_ticket(ticket_id)
        return ciclos[-1] if ciclos else None

    def listar_por_ticket(self, ticket_id: str) -> List[CicloSlaEntity]:
        return sorted(
            (c for (tid, _), c in self._ciclos.items() if tid == ticket_id),
            key=lambda c: c.numero_ciclo,
        )

    def clear(self) -> None:
        self._ciclos.clear()


class InMemoryAlertaDedupRepository:

    def __init__(self):
        self._chaves: Set[Tuple[str, int, str]] = set()

    def inserir_se_ausente(
        self,
        ticket_id: str,
        numero_ciclo: int,
        tipo: TipoAlertaSla,
    ) -> bool:
        chave = (ticket_id, numero_ciclo, tipo.value)
        if chave in self._chaves:
            return False
        self._chaves.add(chave)
        return True

    def __len__(self) -> int:
        return len(self._chaves)

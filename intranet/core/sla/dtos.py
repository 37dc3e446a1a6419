"""
DTOs do Domínio de SLA.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .entities import CicloSlaEntity, SlaPoliticaEntity


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


@dataclass(frozen=True)
class SalvarPoliticaSlaInputDTO:
    """
    Attributes:
        prioridade: BAIXA, MEDIA, ALTA ou URGENTE
        minutos_primeira_resposta / minutos_resolucao: Metas em minutos úteis
    """

    prioridade: str
    minutos_primeira_resposta: int
    minutos_resolucao: int
    nome: str = ""
    ativa: bool = True


@dataclass
class PoliticaSlaOutputDTO:

    id: str
    nome: str
    prioridade: str
    minutos_primeira_resposta: int
    minutos_resolucao: int
    ativa: bool

    @classmethod
    def from_entity(cls, entity: SlaPoliticaEntity) -> "PoliticaSlaOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            prioridade=entity.prioridade.value,
            minutos_primeira_resposta=entity.minutos_primeira_resposta,
            minutos_resolucao=entity.minutos_resolucao,
            ativa=entity.ativa,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "prioridade": self.prioridade,
            "minutos_primeira_resposta": self.minutos_primeira_resposta,
            "minutos_resolucao": self.minutos_resolucao,
            "ativa": self.ativa,
        }


@dataclass
class CicloSlaOutputDTO:
    """Ciclo de SLA como exposto na leitura do chamado."""

    numero_ciclo: int
    aberto_em: datetime
    primeira_resposta_ate: datetime
    primeira_resposta_em: Optional[datetime]
    primeira_resposta_violada: bool
    resolucao_ate: datetime
    resolvido_em: Optional[datetime]
    resolucao_violada: bool
    pausado_em: Optional[datetime]
    minutos_pausados: int
    prazo_manual: bool
    motivo_prazo_manual: Optional[str]

    @classmethod
    def from_entity(cls, entity: CicloSlaEntity) -> "CicloSlaOutputDTO":
        return cls(
            numero_ciclo=entity.numero_ciclo,
            aberto_em=entity.aberto_em,
            primeira_resposta_ate=entity.primeira_resposta_ate,
            primeira_resposta_em=entity.primeira_resposta_em,
            primeira_resposta_violada=entity.primeira_resposta_violada,
            resolucao_ate=entity.resolucao_ate,
            resolvido_em=entity.resolvido_em,
            resolucao_violada=entity.resolucao_violada,
            pausado_em=entity.pausado_em,
            minutos_pausados=entity.minutos_pausados,
            prazo_manual=entity.prazo_manual,
            motivo_prazo_manual=entity.motivo_prazo_manual,
        )

    def to_dict(self) -> dict:
        return {
            "numero_ciclo": self.numero_ciclo,
            "aberto_em": _iso(self.aberto_em),
            "primeira_resposta_ate": _iso(self.primeira_resposta_ate),
            "primeira_resposta_em": _iso(self.primeira_resposta_em),
            "primeira_resposta_violada": self.primeira_resposta_violada,
            "resolucao_ate": _iso(self.resolucao_ate),
            "resolvido_em": _iso(self.resolvido_em),
            "resolucao_violada": self.resolucao_violada,
            "pausado_em": _iso(self.pausado_em),
            "minutos_pausados": self.minutos_pausados,
            "prazo_manual": self.prazo_manual,
            "motivo_prazo_manual": self.motivo_prazo_manual,
        }


@dataclass
class ResultadoVarreduraDTO:
    """
    Resumo de uma execução da varredura de escalonamento.

    Attributes:
        tickets_avaliados: Chamados ativos com ciclo em andamento avaliados
        alertas_disparados: Alertas cuja guarda foi criada nesta execução
        notificacoes_criadas: Total de notificações gravadas
        erros: Chamados cuja avaliação falhou
        ignorada: True quando a chave de notificações estava desligada
    """

    tickets_avaliados: int = 0
    alertas_disparados: int = 0
    notificacoes_criadas: int = 0
    erros: int = 0
    ignorada: bool = False
    tickets_com_erro: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tickets_avaliados": self.tickets_avaliados,
            "alertas_disparados": self.alertas_disparados,
            "notificacoes_criadas": self.notificacoes_criadas,
            "erros": self.erros,
            "ignorada": self.ignorada,
        }

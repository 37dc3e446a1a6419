"""
Resolução de políticas de SLA.

A política ativa da prioridade define as metas; sem política ativa
vale a tabela padrão abaixo. Ausência de política não é erro.
"""

from datetime import datetime
import logging
from typing import Dict, Tuple

from .calendario import adicionar_minutos_uteis
from .entities import Prioridade, PrazosSla
from .ports import SlaPoliticaRepository

logger = logging.getLogger(__name__)


# prioridade -> (minutos primeira resposta, minutos resolução)
METAS_PADRAO: Dict[Prioridade, Tuple[int, int]] = {
    Prioridade.URGENTE: (60, 480),
    Prioridade.ALTA: (240, 1440),
    Prioridade.MEDIA: (480, 4320),
    Prioridade.BAIXA: (1440, 10080),
}

NOMES_POLITICAS_PADRAO: Dict[Prioridade, str] = {
    Prioridade.URGENTE: "SLA Urgente",
    Prioridade.ALTA: "SLA Alta",
    Prioridade.MEDIA: "SLA Média",
    Prioridade.BAIXA: "SLA Baixa",
}


class ResolvedorPoliticaSla:
    """
    Calcula os prazos de um ciclo a partir da prioridade.

    Example:
        resolvedor = ResolvedorPoliticaSla(politica_repo)
        prazos = resolvedor.calcular_prazos(aberto_em, Prioridade.ALTA)
    """

    def __init__(self, politica_repo: SlaPoliticaRepository):
        self.politica_repo = politica_repo

    def metas(self, prioridade: Prioridade) -> Tuple[int, int]:
        politica = self.politica_repo.get_ativa_por_prioridade(prioridade)
        if politica is None:
            logger.debug(f"Sem política ativa para {prioridade.value}, usando tabela padrão")
            return METAS_PADRAO[prioridade]
        return politica.minutos_primeira_resposta, politica.minutos_resolucao

    def calcular_prazos(self, aberto_em: datetime, prioridade: Prioridade) -> PrazosSla:
        minutos_resposta, minutos_resolucao = self.metas(prioridade)
        return PrazosSla(
            primeira_resposta_ate=adicionar_minutos_uteis(aberto_em, minutos_resposta),
            resolucao_ate=adicionar_minutos_uteis(aberto_em, minutos_resolucao),
        )

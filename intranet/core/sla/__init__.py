"""
Domínio de SLA - relógio de horário comercial, políticas por
prioridade e ciclos de SLA por chamado.

A varredura de escalonamento fica em `intranet.core.sla.use_cases`,
importada diretamente por quem a dispara.
"""

from .calendario import adicionar_minutos_uteis, minutos_uteis_entre
from .entities import (
    CicloSlaEntity,
    EstadoSla,
    PrazosSla,
    Prioridade,
    SlaPoliticaEntity,
    TipoAlertaSla,
)
from .politicas import METAS_PADRAO, ResolvedorPoliticaSla
from .ports import AlertaDedupRepository, CicloSlaRepository, SlaPoliticaRepository

__all__ = [
    "adicionar_minutos_uteis",
    "minutos_uteis_entre",
    "CicloSlaEntity",
    "EstadoSla",
    "PrazosSla",
    "Prioridade",
    "SlaPoliticaEntity",
    "TipoAlertaSla",
    "METAS_PADRAO",
    "ResolvedorPoliticaSla",
    "AlertaDedupRepository",
    "CicloSlaRepository",
    "SlaPoliticaRepository",
]

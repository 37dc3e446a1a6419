"""
Domínio de Notificações - registros gerados pelo núcleo (alertas de SLA)
e a chave global por tipo de notificação.
"""

from .entities import NotificacaoEntity, TIPO_STATUS_CHAMADO
from .ports import (
    NotificacaoRepository,
    ConfiguracaoNotificacaoRepository,
)
from .use_cases import DefinirConfiguracaoNotificacaoService

__all__ = [
    "NotificacaoEntity",
    "TIPO_STATUS_CHAMADO",
    "NotificacaoRepository",
    "ConfiguracaoNotificacaoRepository",
    "DefinirConfiguracaoNotificacaoService",
]

"""
Use Cases do Domínio de Notificações.

- DefinirConfiguracaoNotificacaoService: liga/desliga um tipo de
  notificação para todo o portal (admin)
"""

import logging

from intranet.core.shared.auditoria import AuditoriaSink, EntradaAuditoria
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.exceptions import ValidationError

from .ports import ConfiguracaoNotificacaoRepository

logger = logging.getLogger(__name__)


class DefinirConfiguracaoNotificacaoService:

    def __init__(
        self,
        config_repo: ConfiguracaoNotificacaoRepository,
        auditoria: AuditoriaSink,
    ):
        self.config_repo = config_repo
        self.auditoria = auditoria

    def execute(self, tipo: str, habilitada: bool, ator: AtorDTO) -> dict:
        ator.exigir_admin()

        tipo = (tipo or "").strip()
        if not tipo:
            raise ValidationError("Tipo de notificação é obrigatório", field="tipo")

        self.config_repo.definir(tipo, bool(habilitada))
        self.auditoria.registrar(
            EntradaAuditoria(
                ator_id=ator.id,
                acao="notification_setting_update",
                alvo_tipo="notification_setting",
                alvo_id=tipo,
                metadados={"enabled": bool(habilitada)},
            )
        )
        logger.info(f"Notificações '{tipo}' {'habilitadas' if habilitada else 'desabilitadas'} por {ator.id}")

        return {"tipo": tipo, "habilitada": bool(habilitada)}

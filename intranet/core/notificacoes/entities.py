"""
Entidades do Domínio de Notificações.

O núcleo só grava registros de notificação; entrega (push, e-mail,
renderização) fica com outros componentes do portal.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


TIPO_STATUS_CHAMADO = "ticket_status"


@dataclass
class NotificacaoEntity:
    """
    Registro de notificação para um usuário.

    Attributes:
        usuario_id: Destinatário
        tipo: Categoria da notificação (ex: "ticket_status")
        titulo: Título curto
        mensagem: Texto já formatado
        link_url: Link profundo no portal
        dados: Dados estruturados (ex: {"alertType": "RES_BREACH"})
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    usuario_id: str = ""
    tipo: str = TIPO_STATUS_CHAMADO
    titulo: str = ""
    mensagem: str = ""
    link_url: str = ""
    dados: Dict[str, Any] = field(default_factory=dict)
    lida: bool = False
    criado_em: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

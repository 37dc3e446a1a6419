"""
Resolvedores de aprovadores, um por modo de aprovação.

Quem chama só conhece a interface `ResolvedorAprovadores`; incluir um
modo novo é registrar mais um resolvedor em `resolvedores_padrao`.
"""

from typing import Dict, Protocol, Set

from intranet.core.shared.identidade import DiretorioUsuarios

from .entities import ModoAprovacao


class ResolvedorAprovadores(Protocol):

    def resolver(self, ticket, categoria) -> Set[str]:
        """IDs de quem pode decidir a aprovação do chamado."""
        ...


class CoordenadoresSetorSolicitanteResolver:
    """Coordenadores do setor que abriu o chamado."""

    def __init__(self, diretorio: DiretorioUsuarios):
        self.diretorio = diretorio

    def resolver(self, ticket, categoria) -> Set[str]:
        if not ticket.setor_solicitante_id:
            return set()
        return set(self.diretorio.listar_coordenadores_setor(ticket.setor_solicitante_id))


class AdminsSetorDestinoResolver:
    """Admins do setor que atende o chamado."""

    def __init__(self, diretorio: DiretorioUsuarios):
        self.diretorio = diretorio

    def resolver(self, ticket, categoria) -> Set[str]:
        return set(self.diretorio.listar_admins_setor(ticket.setor_destino_id))


class UsuariosEspecificosResolver:
    """Lista explícita configurada na categoria (só usuários ativos)."""

    def __init__(self, diretorio: DiretorioUsuarios):
        self.diretorio = diretorio

    def resolver(self, ticket, categoria) -> Set[str]:
        if categoria is None:
            return set()
        return self.diretorio.filtrar_usuarios_ativos(categoria.aprovadores_ids)


def resolvedores_padrao(diretorio: DiretorioUsuarios) -> Dict[ModoAprovacao, ResolvedorAprovadores]:
    return {
        ModoAprovacao.REQUESTER_COORDINATOR: CoordenadoresSetorSolicitanteResolver(diretorio),
        ModoAprovacao.TI_ADMIN: AdminsSetorDestinoResolver(diretorio),
        ModoAprovacao.SPECIFIC_USERS: UsuariosEspecificosResolver(diretorio),
    }

"""
Domínio de Aprovações - portão de aprovação por categoria.
"""

from .entities import AprovacaoEntity, ModoAprovacao, StatusAprovacao
from .ports import AprovacaoRepository
from .resolvers import ResolvedorAprovadores, resolvedores_padrao

__all__ = [
    "AprovacaoEntity",
    "ModoAprovacao",
    "StatusAprovacao",
    "AprovacaoRepository",
    "ResolvedorAprovadores",
    "resolvedores_padrao",
]

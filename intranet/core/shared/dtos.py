"""
DTOs compartilhados entre os domínios.
"""

from dataclasses import dataclass

from .exceptions import AuthorizationError


@dataclass(frozen=True)
class AtorDTO:
    """
    Quem executa a operação.

    A autenticação acontece fora do núcleo; a borda HTTP monta o ator
    a partir do usuário da sessão.
    """

    id: str
    e_admin: bool = False

    def exigir_admin(self) -> None:
        if not self.e_admin:
            raise AuthorizationError("Operação exclusiva de administradores")


SISTEMA = AtorDTO(id="system", e_admin=True)

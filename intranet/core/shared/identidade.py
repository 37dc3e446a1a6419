"""
Identidade - port de consulta a usuários, papéis e setores.

A autenticação e o cadastro de usuários/setores ficam fora do núcleo;
o núcleo só precisa destas consultas.
"""

from typing import Dict, Iterable, List, Optional, Protocol, Set, runtime_checkable


PAPEL_COORDENADOR = "COORDENADOR"
PAPEL_ADMIN = "ADMIN"
PAPEL_MEMBRO = "MEMBRO"


@runtime_checkable
class DiretorioUsuarios(Protocol):

    def listar_admins_ativos(self) -> List[str]:
        """IDs de todos os administradores ativos do portal."""
        ...

    def listar_coordenadores_setor(self, setor_id: str) -> List[str]:
        ...

    def listar_admins_setor(self, setor_id: str) -> List[str]:
        ...

    def obter_setor_id_por_nome(self, nome: str) -> Optional[str]:
        ...

    def filtrar_usuarios_ativos(self, usuario_ids: Iterable[str]) -> Set[str]:
        """Subconjunto de `usuario_ids` que existe e está ativo."""
        ...


class InMemoryDiretorioUsuarios:
    """
    Diretório em memória para testes.

    Example:
        diretorio = InMemoryDiretorioUsuarios()
        diretorio.adicionar_setor("s-tech", "Tech")
        diretorio.adicionar_usuario("admin-1", e_admin=True)
        diretorio.adicionar_membro("s-tech", "admin-1", PAPEL_ADMIN)
    """

    def __init__(self):
        self._usuarios: Dict[str, dict] = {}
        self._setores: Dict[str, str] = {}
        self._membros: Dict[str, Dict[str, str]] = {}

    def adicionar_usuario(self, usuario_id: str, e_admin: bool = False, ativo: bool = True) -> None:
        self._usuarios[usuario_id] = {"e_admin": e_admin, "ativo": ativo}

    def adicionar_setor(self, setor_id: str, nome: str) -> None:
        self._setores[setor_id] = nome
        self._membros.setdefault(setor_id, {})

    def adicionar_membro(self, setor_id: str, usuario_id: str, papel: str = PAPEL_MEMBRO) -> None:
        if usuario_id not in self._usuarios:
            self.adicionar_usuario(usuario_id)
        self._membros.setdefault(setor_id, {})[usuario_id] = papel

    def _ativo(self, usuario_id: str) -> bool:
        return self._usuarios.get(usuario_id, {}).get("ativo", False)

    def listar_admins_ativos(self) -> List[str]:
        return sorted(
            uid for uid, dados in self._usuarios.items()
            if dados["e_admin"] and dados["ativo"]
        )

    def _por_papel(self, setor_id: str, papel: str) -> List[str]:
        membros = self._membros.get(setor_id, {})
        return sorted(uid for uid, p in membros.items() if p == papel and self._ativo(uid))

    def listar_coordenadores_setor(self, setor_id: str) -> List[str]:
        return self._por_papel(setor_id, PAPEL_COORDENADOR)

    def listar_admins_setor(self, setor_id: str) -> List[str]:
        return self._por_papel(setor_id, PAPEL_ADMIN)

    def obter_setor_id_por_nome(self, nome: str) -> Optional[str]:
        for setor_id, nome_setor in self._setores.items():
            if nome_setor == nome:
                return setor_id
        return None

    def filtrar_usuarios_ativos(self, usuario_ids: Iterable[str]) -> Set[str]:
        return {uid for uid in usuario_ids if self._ativo(uid)}

"""
Fixtures do core: repositórios em memória, relógio fixo e serviços
montados à mão (sem container DI).

Cenário base:
- Setor "Tech" (s-tech) atende os chamados; admin-1 é ADMIN dele
- Setor "RH" (s-rh) tem coord-1 como COORDENADOR
- user-1 e user-2 são usuários comuns; tec-1 é técnico (admin global)
- AGORA = segunda-feira 18/03/2024 09:00 (UTC-3)
"""

from datetime import datetime
from typing import List

import pytest

from intranet.core.aprovacoes.entities import ModoAprovacao
from intranet.core.aprovacoes.ports import InMemoryAprovacaoRepository
from intranet.core.aprovacoes.resolvers import resolvedores_padrao
from intranet.core.notificacoes.ports import (
    InMemoryConfiguracaoNotificacaoRepository,
    InMemoryNotificacaoRepository,
)
from intranet.core.shared.auditoria import InMemoryAuditoriaSink
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.events import DomainEvent
from intranet.core.shared.identidade import (
    PAPEL_ADMIN,
    PAPEL_COORDENADOR,
    InMemoryDiretorioUsuarios,
)
from intranet.core.shared.interfaces import RelogioFixo
from intranet.core.sla.calendario import FUSO_HORARIO
from intranet.core.sla.politicas import ResolvedorPoliticaSla
from intranet.core.sla.ports import (
    InMemoryAlertaDedupRepository,
    InMemoryCicloSlaRepository,
    InMemorySlaPoliticaRepository,
)
from intranet.core.tickets.ciclo_vida import CicloDeVidaTicket
from intranet.core.tickets.entities import CategoriaEntity
from intranet.core.tickets.ports import (
    InMemoryAnexoRepository,
    InMemoryCategoriaRepository,
    InMemoryComentarioRepository,
    InMemoryTicketRepository,
)


AGORA = datetime(2024, 3, 18, 9, 0, tzinfo=FUSO_HORARIO)


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Quantos commits/rollbacks aconteceram
    - Eventos publicados só após commit
    - Vários `with` seguidos na mesma instância (varredura)
    """

    def __init__(self):
        self._pendentes: List[DomainEvent] = []
        self.eventos: List[DomainEvent] = []
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self):
        self._pendentes = []
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self.commits += 1
        self.eventos.extend(self._pendentes)
        self._pendentes = []

    def rollback(self):
        self.rollbacks += 1
        self._pendentes = []

    def publish_event(self, event: DomainEvent):
        self._pendentes.append(event)

    def tipos(self) -> List[str]:
        return [e.event_type for e in self.eventos]

    def do_tipo(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self.eventos if e.event_type == event_type]


@pytest.fixture
def relogio():
    return RelogioFixo(AGORA)


@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def auditoria():
    return InMemoryAuditoriaSink()


@pytest.fixture
def diretorio():
    diretorio = InMemoryDiretorioUsuarios()
    diretorio.adicionar_setor("s-tech", "Tech")
    diretorio.adicionar_setor("s-rh", "RH")
    diretorio.adicionar_usuario("admin-1", e_admin=True)
    diretorio.adicionar_usuario("tec-1", e_admin=True)
    diretorio.adicionar_usuario("user-1")
    diretorio.adicionar_usuario("user-2")
    diretorio.adicionar_usuario("inativo-1", ativo=False)
    diretorio.adicionar_membro("s-tech", "admin-1", PAPEL_ADMIN)
    diretorio.adicionar_membro("s-rh", "coord-1", PAPEL_COORDENADOR)
    return diretorio


@pytest.fixture
def admin():
    return AtorDTO(id="admin-1", e_admin=True)


@pytest.fixture
def usuario():
    return AtorDTO(id="user-1")


@pytest.fixture
def outro_usuario():
    return AtorDTO(id="user-2")


@pytest.fixture
def ticket_repo():
    return InMemoryTicketRepository()


@pytest.fixture
def ciclo_repo():
    return InMemoryCicloSlaRepository()


@pytest.fixture
def politica_repo():
    return InMemorySlaPoliticaRepository()


@pytest.fixture
def aprovacao_repo():
    return InMemoryAprovacaoRepository()


@pytest.fixture
def comentario_repo():
    return InMemoryComentarioRepository()


@pytest.fixture
def anexo_repo():
    return InMemoryAnexoRepository()


@pytest.fixture
def dedup_repo():
    return InMemoryAlertaDedupRepository()


@pytest.fixture
def notificacao_repo():
    return InMemoryNotificacaoRepository()


@pytest.fixture
def config_repo():
    return InMemoryConfiguracaoNotificacaoRepository()


@pytest.fixture
def categorias():
    """Categorias por modo de aprovação, indexadas por id."""
    return {
        c.id: c for c in [
            CategoriaEntity(id="cat-geral", nome="Suporte geral"),
            CategoriaEntity(
                id="cat-acesso",
                nome="Acesso a sistemas",
                requer_aprovacao=True,
                modo_aprovacao=ModoAprovacao.REQUESTER_COORDINATOR,
            ),
            CategoriaEntity(
                id="cat-compra",
                nome="Compra de equipamento",
                requer_aprovacao=True,
                modo_aprovacao=ModoAprovacao.TI_ADMIN,
            ),
            CategoriaEntity(
                id="cat-licenca",
                nome="Licenças",
                requer_aprovacao=True,
                modo_aprovacao=ModoAprovacao.SPECIFIC_USERS,
                aprovadores_ids=("user-2", "inativo-1"),
            ),
            CategoriaEntity(id="cat-antiga", nome="Descontinuada", ativa=False),
        ]
    }


@pytest.fixture
def categoria_repo(categorias):
    return InMemoryCategoriaRepository(list(categorias.values()))


@pytest.fixture
def resolvedor_politica(politica_repo):
    return ResolvedorPoliticaSla(politica_repo)


@pytest.fixture
def resolvedores(diretorio):
    return resolvedores_padrao(diretorio)


@pytest.fixture
def ciclo_vida(ticket_repo, ciclo_repo, aprovacao_repo, resolvedor_politica, uow):
    return CicloDeVidaTicket(
        ticket_repo=ticket_repo,
        ciclo_repo=ciclo_repo,
        aprovacao_repo=aprovacao_repo,
        resolvedor_politica=resolvedor_politica,
        uow=uow,
    )

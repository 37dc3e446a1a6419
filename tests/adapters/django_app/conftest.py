"""
Configuração pytest para testes com Django.

O Django já foi configurado em tests/conftest.py; aqui ficam as
fixtures de banco (usuários, setores, categorias) e o reset do
container DI entre testes.
"""

from datetime import datetime

import pytest

from intranet.config.container import reset_container
from intranet.core.sla.calendario import FUSO_HORARIO


SEGUNDA_8H = datetime(2024, 3, 18, 8, 0, tzinfo=FUSO_HORARIO)


@pytest.fixture(autouse=True)
def reset_di_container():
    """Reset container entre testes."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def usuarios(db):
    """
    Usuários do auth: um staff (admin global), dois comuns e um inativo.

    Retorna os IDs como string, do jeito que circulam no core.
    """
    from django.contrib.auth import get_user_model

    User = get_user_model()
    criados = {
        'admin': User.objects.create_user(username='admin', password='x', is_staff=True),
        'tecnico': User.objects.create_user(username='tecnico', password='x'),
        'solicitante': User.objects.create_user(username='solicitante', password='x'),
        'inativo': User.objects.create_user(
            username='inativo', password='x', is_staff=True, is_active=False
        ),
    }
    return {nome: str(user.pk) for nome, user in criados.items()}


@pytest.fixture
def setores(db, usuarios):
    """Setor Tech (destino) com o admin, e RH com o técnico como coordenador."""
    from intranet.adapters.django_app.tickets.models import MembroSetorModel, SetorModel

    tech = SetorModel.objects.create(id='s-tech', nome='Tech')
    rh = SetorModel.objects.create(id='s-rh', nome='RH')
    MembroSetorModel.objects.create(setor=tech, usuario_id=usuarios['admin'], papel='ADMIN')
    MembroSetorModel.objects.create(setor=rh, usuario_id=usuarios['tecnico'], papel='COORDENADOR')
    MembroSetorModel.objects.create(setor=rh, usuario_id=usuarios['inativo'], papel='COORDENADOR')
    return {'tech': tech.id, 'rh': rh.id}


@pytest.fixture
def categorias(db):
    from intranet.adapters.django_app.tickets.models import TicketCategoriaModel

    geral = TicketCategoriaModel.objects.create(id='cat-geral', nome='Suporte geral')
    acesso = TicketCategoriaModel.objects.create(
        id='cat-acesso',
        nome='Acesso a sistemas',
        requer_aprovacao=True,
        modo_aprovacao='REQUESTER_COORDINATOR',
    )
    return {'geral': geral.id, 'acesso': acesso.id}


@pytest.fixture
def ticket_entity(usuarios, setores):
    """Chamado ALTA aberto segunda 08:00 pelo solicitante."""
    from intranet.core.sla.entities import Prioridade
    from intranet.core.tickets.entities import TicketEntity

    return TicketEntity.criar(
        titulo="Impressora do RH offline",
        descricao="A impressora do segundo andar não aparece na rede",
        criador_id=usuarios['solicitante'],
        setor_destino_id=setores['tech'],
        setor_solicitante_id=setores['rh'],
        agora=SEGUNDA_8H,
        prioridade=Prioridade.ALTA,
        tags=["Impressora", "rede"],
    )

"""
Fixtures de integração: container DI real sobre SQLite, com relógio
fixo e publisher em memória.
"""

from datetime import datetime

import pytest
from dependency_injector import providers

from intranet.adapters.django_app.events.publishers import InMemoryEventPublisher
from intranet.config.container import get_container, reset_container
from intranet.core.shared.interfaces import RelogioFixo
from intranet.core.sla.calendario import FUSO_HORARIO


SEGUNDA_8H = datetime(2024, 3, 18, 8, 0, tzinfo=FUSO_HORARIO)


@pytest.fixture
def relogio():
    return RelogioFixo(SEGUNDA_8H)


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def container(relogio, publisher):
    reset_container()
    container = get_container()
    container.relogio.override(providers.Object(relogio))
    container.event_publisher.override(providers.Object(publisher))
    yield container
    container.reset_override()
    reset_container()


@pytest.fixture
def usuarios(transactional_db):
    from django.contrib.auth import get_user_model

    User = get_user_model()
    admin = User.objects.create_user(username='ana.ti', password='x', is_staff=True)
    solicitante = User.objects.create_user(username='bruno.rh', password='x')
    return {'admin': admin, 'solicitante': solicitante}


@pytest.fixture
def cadastro(usuarios):
    """Setor Tech com a admin de TI e uma categoria que exige aprovação da TI."""
    from intranet.adapters.django_app.tickets.models import (
        MembroSetorModel,
        SetorModel,
        TicketCategoriaModel,
    )

    tech = SetorModel.objects.create(id='s-tech', nome='Tech')
    MembroSetorModel.objects.create(setor=tech, usuario_id=str(usuarios['admin'].pk), papel='ADMIN')
    TicketCategoriaModel.objects.create(
        id='cat-compra',
        nome='Compra de equipamento',
        requer_aprovacao=True,
        modo_aprovacao='TI_ADMIN',
    )
    return {'setor_id': tech.id, 'categoria_id': 'cat-compra'}

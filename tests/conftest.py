"""
Configurações globais do Pytest para o Helpdesk da Intranet.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.

O Django é configurado aqui (SQLite em memória) para que os testes
de adapters e de integração usem o pytest-django sem um módulo de
settings próprio. Os testes do core não tocam no Django.
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django antes da coleta dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'intranet.adapters.django_app.tickets',
            ],
            ROOT_URLCONF='intranet.adapters.django_app.tickets.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            TICKETS_TARGET_SECTOR_NAME='Tech',
            SLA_RISK_THRESHOLD_HOURS=4,
            SLA_SCAN_INTERVAL_SECONDS=120,
            EVENT_PUBLISHER_MODE='sync',
            CELERY_TASK_ALWAYS_EAGER=True,
        )
        django.setup()


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Varredura periódica de escalonamento de SLA (beat)
- Processar Domain Events de forma assíncrona (EVENT_PUBLISHER_MODE=celery)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A intranet.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A intranet.config.celery beat -l INFO
"""

import os

from celery import Celery
from kombu import Exchange, Queue

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'intranet.config.settings')

app = Celery('intranet')

# Carregar configurações do Django (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    # Serialização
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    # Timezone
    timezone='America/Sao_Paulo',
    enable_utc=True,

    # Configurações de execução
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    # Resultados
    result_expires=3600,
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('sla', Exchange('sla'), routing_key='sla.#'),
)

app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'intranet.adapters.django_app.events.handlers.varrer_sla': {'queue': 'sla'},
    'intranet.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

# Auto-descoberta de tarefas
app.autodiscover_tasks(['intranet.adapters.django_app.events'], related_name='handlers')


def agenda_beat() -> dict:
    """Tarefas agendadas; o intervalo da varredura vem de settings.SLA_SCAN_INTERVAL_SECONDS."""
    from django.conf import settings

    return {
        'varredura-escalonamento-sla': {
            'task': 'intranet.adapters.django_app.events.handlers.varrer_sla',
            'schedule': float(getattr(settings, 'SLA_SCAN_INTERVAL_SECONDS', 300)),
            'options': {'expires': 240},
        },
    }


# Tarefas agendadas (beat)
app.conf.beat_schedule = agenda_beat()

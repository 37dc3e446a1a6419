"""
Configuração do Django App do helpdesk.

Um único app (label `tickets`) concentra chamados, SLA, aprovações
e notificações, que compartilham transação e migrations.
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'intranet.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Helpdesk - Chamados e SLA'

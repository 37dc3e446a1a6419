"""
URL Configuration do Intranet Helpdesk.

Estrutura:
- /admin/ - Django Admin
- /tickets/api/ - API JSON de chamados, SLA e notificações
- /health/ - Health check
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # Helpdesk
    path('tickets/', include('intranet.adapters.django_app.tickets.urls')),

    # Health check
    path('health/', lambda r: JsonResponse({'status': 'ok'})),
]

"""
URL patterns do helpdesk (API JSON).

Rotas fixas (sla/, notificacoes/) vêm antes de <pk> para não conflitar.
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    # SLA e notificações
    path('api/sla/politicas/', api_views.SlaPoliticaAPIView.as_view(), name='api_sla_politicas'),
    path(
        'api/notificacoes/configuracoes/<str:tipo>/',
        api_views.ConfiguracaoNotificacaoAPIView.as_view(),
        name='api_notificacao_configuracao',
    ),

    # Listagem e criação
    path('api/', api_views.TicketAPIListView.as_view(), name='api_list'),

    # Detalhes e atualização
    path('api/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),

    # Ações via API
    path('api/<str:pk>/responsaveis/', api_views.TicketAPIResponsaveisView.as_view(), name='api_responsaveis'),
    path('api/<str:pk>/comentarios/', api_views.TicketAPIComentariosView.as_view(), name='api_comentarios'),
    path('api/<str:pk>/anexos/', api_views.TicketAPIAnexosView.as_view(), name='api_anexos'),
    path('api/<str:pk>/aprovacao/', api_views.TicketAPIAprovacaoView.as_view(), name='api_aprovacao'),
    path(
        'api/<str:pk>/aprovacao/decisao/',
        api_views.TicketAPIDecisaoAprovacaoView.as_view(),
        name='api_aprovacao_decisao',
    ),
    path('api/<str:pk>/sla/prazo/', api_views.TicketAPIPrazoSlaView.as_view(), name='api_sla_prazo'),
]

"""
Django Admin do helpdesk.

Configuração do admin para consulta de chamados, ciclos de SLA e
cadastros de apoio (setores, categorias, políticas). Mudanças de status
passam pela API para que o SLA acompanhe; por isso status e ciclos
ficam somente leitura aqui.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    ConfiguracaoNotificacaoModel,
    MembroSetorModel,
    SetorModel,
    SlaCicloModel,
    SlaPoliticaModel,
    TicketCategoriaModel,
    TicketEventoModel,
    TicketModel,
)

BADGE = (
    '<span style="background-color: {}; color: white; padding: 3px 8px; '
    'border-radius: 3px; font-size: 11px;">{}</span>'
)


class MembroSetorInline(admin.TabularInline):
    model = MembroSetorModel
    extra = 0


@admin.register(SetorModel)
class SetorAdmin(admin.ModelAdmin):
    list_display = ['nome', 'ativo']
    search_fields = ['nome']
    inlines = [MembroSetorInline]


@admin.register(TicketCategoriaModel)
class TicketCategoriaAdmin(admin.ModelAdmin):
    list_display = ['nome', 'requer_aprovacao', 'modo_aprovacao', 'ativa']
    list_filter = ['requer_aprovacao', 'modo_aprovacao', 'ativa']
    search_fields = ['nome']


class SlaCicloInline(admin.TabularInline):
    model = SlaCicloModel
    extra = 0
    can_delete = False
    fields = [
        'numero_ciclo',
        'aberto_em',
        'primeira_resposta_ate',
        'primeira_resposta_em',
        'resolucao_ate',
        'resolvido_em',
        'resolucao_violada',
        'minutos_pausados',
        'prazo_manual',
    ]
    readonly_fields = fields


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = [
        'id_curto',
        'titulo',
        'status_badge',
        'prioridade_badge',
        'categoria',
        'criador_id',
        'criado_em',
        'sla_status',
    ]

    list_filter = ['status', 'prioridade', 'categoria', 'criado_em']

    search_fields = ['id', 'titulo', 'descricao', 'criador_id']

    readonly_fields = ['id', 'status', 'criado_em', 'atualizado_em', 'fechado_em']

    inlines = [SlaCicloInline]

    ordering = ['-criado_em']

    date_hierarchy = 'criado_em'

    def id_curto(self, obj):
        return obj.id[:8] + '...'
    id_curto.short_description = 'ID'

    def status_badge(self, obj):
        colors = {
            'ABERTO': '#17a2b8',
            'EM_ANDAMENTO': '#ffc107',
            'AGUARDANDO_USUARIO': '#6c757d',
            'AGUARDANDO_APROVACAO': '#6f42c1',
            'RESOLVIDO': '#28a745',
            'CANCELADO': '#343a40',
        }
        return format_html(BADGE, colors.get(obj.status, '#6c757d'), obj.get_status_display())
    status_badge.short_description = 'Status'

    def prioridade_badge(self, obj):
        colors = {
            'BAIXA': '#28a745',
            'MEDIA': '#ffc107',
            'ALTA': '#fd7e14',
            'URGENTE': '#dc3545',
        }
        return format_html(BADGE, colors.get(obj.prioridade, '#6c757d'), obj.get_prioridade_display())
    prioridade_badge.short_description = 'Prioridade'

    def sla_status(self, obj):
        """Situação do último ciclo de SLA."""
        ciclo = obj.ciclos_sla.order_by('-numero_ciclo').first()
        if ciclo is None:
            return '-'
        if ciclo.resolucao_violada or ciclo.primeira_resposta_violada:
            return format_html('<span style="color: #dc3545; font-weight: bold;">{}</span>', 'Violado')
        if ciclo.pausado_em:
            return format_html('<span style="color: #6c757d;">{}</span>', 'Pausado')
        return format_html('<span style="color: #28a745;">{}</span>', f'Ciclo {ciclo.numero_ciclo}')
    sla_status.short_description = 'SLA'


@admin.register(SlaPoliticaModel)
class SlaPoliticaAdmin(admin.ModelAdmin):
    list_display = ['nome', 'prioridade', 'minutos_primeira_resposta', 'minutos_resolucao', 'ativa']
    list_filter = ['ativa']


@admin.register(ConfiguracaoNotificacaoModel)
class ConfiguracaoNotificacaoAdmin(admin.ModelAdmin):
    list_display = ['tipo', 'habilitada', 'atualizado_em']


@admin.register(TicketEventoModel)
class TicketEventoAdmin(admin.ModelAdmin):
    """Admin para o Event Store (somente leitura)."""

    list_display = ['event_type', 'aggregate_id_curto', 'sequence', 'ator_id', 'occurred_at']
    list_filter = ['event_type', 'aggregate_type']
    search_fields = ['aggregate_id', 'event_id']
    ordering = ['-occurred_at']

    def aggregate_id_curto(self, obj):
        return obj.aggregate_id[:8] + '...'
    aggregate_id_curto.short_description = 'Agregado'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

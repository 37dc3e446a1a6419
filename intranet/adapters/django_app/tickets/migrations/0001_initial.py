"""
Migration inicial do helpdesk.

Cria as tabelas:
- setores, setor_membros: Setores e papéis
- tickets, ticket_*: Chamados, responsáveis, comentários, anexos,
  categorias e aprovações
- sla_politicas, sla_ciclos, sla_alertas_dedup: SLA
- notificacoes, notificacao_configuracoes: Notificações
- ticket_eventos: Event Store
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


PRIORIDADES = [
    ('BAIXA', 'Baixa'),
    ('MEDIA', 'Média'),
    ('ALTA', 'Alta'),
    ('URGENTE', 'Urgente'),
]

MODOS_APROVACAO = [
    ('REQUESTER_COORDINATOR', 'Coordenador do setor solicitante'),
    ('TI_ADMIN', 'Admin do setor de destino'),
    ('SPECIFIC_USERS', 'Usuários específicos'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Setores
        # =================================================================
        migrations.CreateModel(
            name='SetorModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(
                    max_length=120,
                    unique=True,
                    help_text='Nome do setor (TICKETS_TARGET_SECTOR_NAME referencia este campo)'
                )),
                ('ativo', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Setor',
                'verbose_name_plural': 'Setores',
                'db_table': 'setores',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='MembroSetorModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('usuario_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do usuário (auth.User.pk como string)'
                )),
                ('papel', models.CharField(
                    max_length=20,
                    choices=[('COORDENADOR', 'Coordenador'), ('ADMIN', 'Admin'), ('MEMBRO', 'Membro')],
                    default='MEMBRO',
                )),
                ('setor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='membros',
                    to='tickets.setormodel',
                )),
            ],
            options={
                'verbose_name': 'Membro de Setor',
                'verbose_name_plural': 'Membros de Setor',
                'db_table': 'setor_membros',
            },
        ),
        migrations.AddConstraint(
            model_name='membrosetormodel',
            constraint=models.UniqueConstraint(fields=('setor', 'usuario_id'), name='uniq_setor_membro'),
        ),

        # =================================================================
        # Chamados
        # =================================================================
        migrations.CreateModel(
            name='TicketCategoriaModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(max_length=120, unique=True)),
                ('requer_aprovacao', models.BooleanField(
                    default=False,
                    help_text='Chamados da categoria passam pelo portão de aprovação'
                )),
                ('modo_aprovacao', models.CharField(max_length=30, choices=MODOS_APROVACAO, null=True, blank=True)),
                ('aprovadores_ids', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='IDs de usuários para o modo SPECIFIC_USERS'
                )),
                ('ativa', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Categoria de Chamado',
                'verbose_name_plural': 'Categorias de Chamado',
                'db_table': 'ticket_categorias',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do chamado'
                )),
                ('titulo', models.CharField(max_length=200, db_index=True, help_text='Título descritivo do chamado')),
                ('descricao', models.TextField(help_text='Descrição detalhada do problema')),
                ('status', models.CharField(
                    max_length=30,
                    choices=[
                        ('ABERTO', 'Aberto'),
                        ('EM_ANDAMENTO', 'Em andamento'),
                        ('AGUARDANDO_USUARIO', 'Aguardando usuário'),
                        ('AGUARDANDO_APROVACAO', 'Aguardando aprovação'),
                        ('RESOLVIDO', 'Resolvido'),
                        ('CANCELADO', 'Cancelado'),
                    ],
                    default='ABERTO',
                    db_index=True,
                )),
                ('prioridade', models.CharField(max_length=20, choices=PRIORIDADES, default='MEDIA', db_index=True)),
                ('setor_solicitante_id', models.CharField(max_length=36, null=True, blank=True)),
                ('setor_destino_id', models.CharField(max_length=36, db_index=True)),
                ('criador_id', models.CharField(max_length=100, db_index=True, help_text='ID do usuário criador')),
                ('tags', models.JSONField(default=list, blank=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('fechado_em', models.DateTimeField(null=True, blank=True)),
                ('categoria', models.ForeignKey(
                    on_delete=django.db.models.deletion.SET_NULL,
                    null=True,
                    blank=True,
                    related_name='tickets',
                    to='tickets.ticketcategoriamodel',
                )),
            ],
            options={
                'verbose_name': 'Chamado',
                'verbose_name_plural': 'Chamados',
                'db_table': 'tickets',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['criador_id', 'criado_em'], name='tickets_criador_criado_idx'),
        ),
        migrations.CreateModel(
            name='TicketResponsavelModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('usuario_id', models.CharField(max_length=100, db_index=True)),
                ('ordem', models.PositiveIntegerField(default=0)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='responsaveis',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'ticket_responsaveis',
                'ordering': ['ordem'],
            },
        ),
        migrations.AddConstraint(
            model_name='ticketresponsavelmodel',
            constraint=models.UniqueConstraint(fields=('ticket', 'usuario_id'), name='uniq_ticket_responsavel'),
        ),
        migrations.CreateModel(
            name='TicketComentarioModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('autor_id', models.CharField(max_length=100)),
                ('corpo', models.TextField()),
                ('interno', models.BooleanField(default=False, help_text='Visível apenas para administradores')),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comentarios',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'ticket_comentarios',
                'ordering': ['criado_em'],
            },
        ),
        migrations.CreateModel(
            name='TicketAnexoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('autor_id', models.CharField(max_length=100)),
                ('nome_arquivo', models.CharField(max_length=255)),
                ('caminho', models.CharField(max_length=500)),
                ('tamanho_bytes', models.BigIntegerField(default=0)),
                ('content_type', models.CharField(max_length=120, null=True, blank=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='anexos',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'ticket_anexos',
                'ordering': ['criado_em'],
            },
        ),
        migrations.CreateModel(
            name='TicketAprovacaoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('modo', models.CharField(max_length=30, choices=MODOS_APROVACAO)),
                ('status', models.CharField(
                    max_length=20,
                    choices=[('PENDING', 'Pendente'), ('APPROVED', 'Aprovada'), ('REJECTED', 'Rejeitada')],
                    default='PENDING',
                    db_index=True,
                )),
                ('observacao', models.TextField(null=True, blank=True)),
                ('decidido_por_id', models.CharField(max_length=100, null=True, blank=True)),
                ('decidido_em', models.DateTimeField(null=True, blank=True)),
                ('solicitado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='aprovacoes',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'ticket_aprovacoes',
                'ordering': ['solicitado_em'],
            },
        ),

        # =================================================================
        # SLA
        # =================================================================
        migrations.CreateModel(
            name='SlaPoliticaModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(max_length=120)),
                ('prioridade', models.CharField(max_length=20, choices=PRIORIDADES, unique=True)),
                ('minutos_primeira_resposta', models.PositiveIntegerField(
                    help_text='Meta de primeira resposta em minutos úteis'
                )),
                ('minutos_resolucao', models.PositiveIntegerField(help_text='Meta de resolução em minutos úteis')),
                ('ativa', models.BooleanField(default=True)),
                ('atualizado_em', models.DateTimeField(null=True, blank=True)),
            ],
            options={
                'verbose_name': 'Política de SLA',
                'verbose_name_plural': 'Políticas de SLA',
                'db_table': 'sla_politicas',
            },
        ),
        migrations.CreateModel(
            name='SlaCicloModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('numero_ciclo', models.PositiveIntegerField()),
                ('aberto_em', models.DateTimeField()),
                ('primeira_resposta_ate', models.DateTimeField()),
                ('primeira_resposta_em', models.DateTimeField(null=True, blank=True)),
                ('primeira_resposta_violada', models.BooleanField(default=False)),
                ('resolucao_ate', models.DateTimeField()),
                ('resolvido_em', models.DateTimeField(null=True, blank=True, db_index=True)),
                ('resolucao_violada', models.BooleanField(default=False)),
                ('pausado_em', models.DateTimeField(null=True, blank=True)),
                ('minutos_pausados', models.PositiveIntegerField(default=0)),
                ('prazo_manual', models.BooleanField(default=False)),
                ('motivo_prazo_manual', models.TextField(null=True, blank=True)),
                ('prazo_manual_por_id', models.CharField(max_length=100, null=True, blank=True)),
                ('prazo_manual_em', models.DateTimeField(null=True, blank=True)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='ciclos_sla',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'verbose_name': 'Ciclo de SLA',
                'verbose_name_plural': 'Ciclos de SLA',
                'db_table': 'sla_ciclos',
                'ordering': ['ticket', 'numero_ciclo'],
            },
        ),
        migrations.AddConstraint(
            model_name='slaciclomodel',
            constraint=models.UniqueConstraint(fields=('ticket', 'numero_ciclo'), name='uniq_ciclo_por_ticket'),
        ),
        migrations.CreateModel(
            name='SlaAlertaDedupModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('numero_ciclo', models.PositiveIntegerField()),
                ('tipo_alerta', models.CharField(
                    max_length=20,
                    choices=[
                        ('FIRST_RISK', 'Primeira resposta em risco'),
                        ('FIRST_BREACH', 'Primeira resposta violada'),
                        ('RES_RISK', 'Resolução em risco'),
                        ('RES_BREACH', 'Resolução violada'),
                    ],
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='alertas_sla',
                    to='tickets.ticketmodel',
                )),
            ],
            options={
                'db_table': 'sla_alertas_dedup',
            },
        ),
        migrations.AddConstraint(
            model_name='slaalertadedupmodel',
            constraint=models.UniqueConstraint(
                fields=('ticket', 'numero_ciclo', 'tipo_alerta'),
                name='uniq_alerta_por_ciclo',
            ),
        ),

        # =================================================================
        # Notificações
        # =================================================================
        migrations.CreateModel(
            name='NotificacaoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('usuario_id', models.CharField(max_length=100, db_index=True)),
                ('tipo', models.CharField(max_length=50, db_index=True)),
                ('titulo', models.CharField(max_length=200)),
                ('mensagem', models.TextField()),
                ('link_url', models.CharField(max_length=500, blank=True, default='')),
                ('dados', models.JSONField(default=dict, blank=True)),
                ('lida', models.BooleanField(default=False)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
            ],
            options={
                'verbose_name': 'Notificação',
                'verbose_name_plural': 'Notificações',
                'db_table': 'notificacoes',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='notificacaomodel',
            index=models.Index(fields=['usuario_id', 'lida'], name='notif_usuario_lida_idx'),
        ),
        migrations.CreateModel(
            name='ConfiguracaoNotificacaoModel',
            fields=[
                ('tipo', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('habilitada', models.BooleanField(default=True)),
                ('atualizado_em', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Configuração de Notificação',
                'verbose_name_plural': 'Configurações de Notificação',
                'db_table': 'notificacao_configuracoes',
            },
        ),

        # =================================================================
        # Event Store
        # =================================================================
        migrations.CreateModel(
            name='TicketEventoModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento'
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do evento (ex: TicketReabertoEvent)'
                )),
                ('aggregate_type', models.CharField(max_length=100, db_index=True)),
                ('aggregate_id', models.CharField(max_length=36, db_index=True)),
                ('event_data', models.JSONField(default=dict)),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(default=0, help_text='Sequência do evento no agregado')),
                ('ator_id', models.CharField(max_length=100, null=True, blank=True, db_index=True)),
                ('occurred_at', models.DateTimeField()),
                ('recorded_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Evento de Chamado',
                'verbose_name_plural': 'Eventos de Chamado',
                'db_table': 'ticket_eventos',
                'ordering': ['aggregate_id', 'sequence'],
            },
        ),
        migrations.AddConstraint(
            model_name='ticketeventomodel',
            constraint=models.UniqueConstraint(fields=('aggregate_id', 'sequence'), name='uniq_evento_sequencia'),
        ),
    ]

"""
Django Models do helpdesk.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em intranet/core/.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Tabelas:
- Setores e papéis: SetorModel, MembroSetorModel
- Chamados: TicketModel, TicketResponsavelModel, TicketComentarioModel,
  TicketAnexoModel, TicketCategoriaModel, TicketAprovacaoModel
- SLA: SlaPoliticaModel, SlaCicloModel, SlaAlertaDedupModel
- Notificações: NotificacaoModel, ConfiguracaoNotificacaoModel
- Event Store: TicketEventoModel
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Espelha TicketStatus do Core."""
    ABERTO = 'ABERTO', 'Aberto'
    EM_ANDAMENTO = 'EM_ANDAMENTO', 'Em andamento'
    AGUARDANDO_USUARIO = 'AGUARDANDO_USUARIO', 'Aguardando usuário'
    AGUARDANDO_APROVACAO = 'AGUARDANDO_APROVACAO', 'Aguardando aprovação'
    RESOLVIDO = 'RESOLVIDO', 'Resolvido'
    CANCELADO = 'CANCELADO', 'Cancelado'


class PrioridadeChoices(models.TextChoices):
    """Espelha Prioridade do Core."""
    BAIXA = 'BAIXA', 'Baixa'
    MEDIA = 'MEDIA', 'Média'
    ALTA = 'ALTA', 'Alta'
    URGENTE = 'URGENTE', 'Urgente'


class ModoAprovacaoChoices(models.TextChoices):
    REQUESTER_COORDINATOR = 'REQUESTER_COORDINATOR', 'Coordenador do setor solicitante'
    TI_ADMIN = 'TI_ADMIN', 'Admin do setor de destino'
    SPECIFIC_USERS = 'SPECIFIC_USERS', 'Usuários específicos'


class StatusAprovacaoChoices(models.TextChoices):
    PENDING = 'PENDING', 'Pendente'
    APPROVED = 'APPROVED', 'Aprovada'
    REJECTED = 'REJECTED', 'Rejeitada'


class TipoAlertaChoices(models.TextChoices):
    FIRST_RISK = 'FIRST_RISK', 'Primeira resposta em risco'
    FIRST_BREACH = 'FIRST_BREACH', 'Primeira resposta violada'
    RES_RISK = 'RES_RISK', 'Resolução em risco'
    RES_BREACH = 'RES_BREACH', 'Resolução violada'


class PapelSetorChoices(models.TextChoices):
    COORDENADOR = 'COORDENADOR', 'Coordenador'
    ADMIN = 'ADMIN', 'Admin'
    MEMBRO = 'MEMBRO', 'Membro'


# =============================================================================
# Setores
# =============================================================================

class SetorModel(models.Model):
    """Setor do portal (ex: Tech, RH, Financeiro)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(
        max_length=120,
        unique=True,
        help_text="Nome do setor (TICKETS_TARGET_SECTOR_NAME referencia este campo)"
    )

    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'setores'
        verbose_name = 'Setor'
        verbose_name_plural = 'Setores'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class MembroSetorModel(models.Model):
    """Papel de um usuário em um setor."""

    id = models.BigAutoField(primary_key=True)

    setor = models.ForeignKey(
        SetorModel,
        on_delete=models.CASCADE,
        related_name='membros',
    )

    usuario_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do usuário (auth.User.pk como string)"
    )

    papel = models.CharField(
        max_length=20,
        choices=PapelSetorChoices.choices,
        default=PapelSetorChoices.MEMBRO,
    )

    class Meta:
        db_table = 'setor_membros'
        verbose_name = 'Membro de Setor'
        verbose_name_plural = 'Membros de Setor'
        constraints = [
            models.UniqueConstraint(fields=['setor', 'usuario_id'], name='uniq_setor_membro'),
        ]

    def __str__(self):
        return f"{self.usuario_id} @ {self.setor_id} ({self.papel})"


# =============================================================================
# Chamados
# =============================================================================

class TicketCategoriaModel(models.Model):
    """Categoria de chamado e sua configuração de aprovação."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=120, unique=True)

    requer_aprovacao = models.BooleanField(
        default=False,
        help_text="Chamados da categoria passam pelo portão de aprovação"
    )

    modo_aprovacao = models.CharField(
        max_length=30,
        choices=ModoAprovacaoChoices.choices,
        null=True,
        blank=True,
    )

    aprovadores_ids = models.JSONField(
        default=list,
        blank=True,
        help_text="IDs de usuários para o modo SPECIFIC_USERS"
    )

    ativa = models.BooleanField(default=True)

    class Meta:
        db_table = 'ticket_categorias'
        verbose_name = 'Categoria de Chamado'
        verbose_name_plural = 'Categorias de Chamado'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class TicketModel(models.Model):
    """
    Model Django para persistência de chamados.

    Fields:
        id: UUID gerado pela Entity
        status / prioridade: choices espelhando o Core
        setor_solicitante_id / setor_destino_id: IDs de SetorModel
        categoria: Categoria (opcional)
        criador_id: ID do usuário criador (string)
        fechado_em: Preenchido em RESOLVIDO
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do chamado"
    )

    titulo = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Título descritivo do chamado"
    )

    descricao = models.TextField(
        help_text="Descrição detalhada do problema"
    )

    status = models.CharField(
        max_length=30,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.ABERTO,
        db_index=True,
    )

    prioridade = models.CharField(
        max_length=20,
        choices=PrioridadeChoices.choices,
        default=PrioridadeChoices.MEDIA,
        db_index=True,
    )

    setor_solicitante_id = models.CharField(max_length=36, null=True, blank=True)

    setor_destino_id = models.CharField(max_length=36, db_index=True)

    categoria = models.ForeignKey(
        TicketCategoriaModel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets',
    )

    criador_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do usuário criador"
    )

    tags = models.JSONField(default=list, blank=True)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    fechado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Chamado'
        verbose_name_plural = 'Chamados'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['status', 'criado_em'], name='tickets_status_criado_idx'),
            models.Index(fields=['criador_id', 'criado_em'], name='tickets_criador_criado_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.titulo}"

    def __repr__(self):
        return f"<TicketModel id={self.id[:8]} status={self.status}>"


class TicketResponsavelModel(models.Model):

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='responsaveis',
    )

    usuario_id = models.CharField(max_length=100, db_index=True)

    ordem = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'ticket_responsaveis'
        ordering = ['ordem']
        constraints = [
            models.UniqueConstraint(fields=['ticket', 'usuario_id'], name='uniq_ticket_responsavel'),
        ]


class TicketComentarioModel(models.Model):

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='comentarios',
    )

    autor_id = models.CharField(max_length=100)

    corpo = models.TextField()

    interno = models.BooleanField(
        default=False,
        help_text="Visível apenas para administradores"
    )

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_comentarios'
        ordering = ['criado_em']


class TicketAnexoModel(models.Model):
    """Metadados do arquivo; o conteúdo fica no serviço de arquivos."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='anexos',
    )

    autor_id = models.CharField(max_length=100)
    nome_arquivo = models.CharField(max_length=255)
    caminho = models.CharField(max_length=500)
    tamanho_bytes = models.BigIntegerField(default=0)
    content_type = models.CharField(max_length=120, null=True, blank=True)
    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_anexos'
        ordering = ['criado_em']


class TicketAprovacaoModel(models.Model):

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='aprovacoes',
    )

    modo = models.CharField(max_length=30, choices=ModoAprovacaoChoices.choices)

    status = models.CharField(
        max_length=20,
        choices=StatusAprovacaoChoices.choices,
        default=StatusAprovacaoChoices.PENDING,
        db_index=True,
    )

    observacao = models.TextField(null=True, blank=True)
    decidido_por_id = models.CharField(max_length=100, null=True, blank=True)
    decidido_em = models.DateTimeField(null=True, blank=True)
    solicitado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_aprovacoes'
        ordering = ['solicitado_em']


# =============================================================================
# SLA
# =============================================================================

class SlaPoliticaModel(models.Model):
    """Política de SLA; no máximo uma por prioridade."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=120)

    prioridade = models.CharField(
        max_length=20,
        choices=PrioridadeChoices.choices,
        unique=True,
    )

    minutos_primeira_resposta = models.PositiveIntegerField(
        help_text="Meta de primeira resposta em minutos úteis"
    )

    minutos_resolucao = models.PositiveIntegerField(
        help_text="Meta de resolução em minutos úteis"
    )

    ativa = models.BooleanField(default=True)

    atualizado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'sla_politicas'
        verbose_name = 'Política de SLA'
        verbose_name_plural = 'Políticas de SLA'

    def __str__(self):
        return f"{self.nome} ({self.prioridade})"


class SlaCicloModel(models.Model):
    """
    Ciclo de SLA de um chamado (histórico append-only).

    A restrição (ticket, numero_ciclo) impede que duas reaberturas
    concorrentes criem o mesmo ciclo.
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='ciclos_sla',
    )

    numero_ciclo = models.PositiveIntegerField()

    aberto_em = models.DateTimeField()

    primeira_resposta_ate = models.DateTimeField()
    primeira_resposta_em = models.DateTimeField(null=True, blank=True)
    primeira_resposta_violada = models.BooleanField(default=False)

    resolucao_ate = models.DateTimeField()
    resolvido_em = models.DateTimeField(null=True, blank=True, db_index=True)
    resolucao_violada = models.BooleanField(default=False)

    pausado_em = models.DateTimeField(null=True, blank=True)
    minutos_pausados = models.PositiveIntegerField(default=0)

    prazo_manual = models.BooleanField(default=False)
    motivo_prazo_manual = models.TextField(null=True, blank=True)
    prazo_manual_por_id = models.CharField(max_length=100, null=True, blank=True)
    prazo_manual_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'sla_ciclos'
        verbose_name = 'Ciclo de SLA'
        verbose_name_plural = 'Ciclos de SLA'
        ordering = ['ticket', 'numero_ciclo']
        constraints = [
            models.UniqueConstraint(fields=['ticket', 'numero_ciclo'], name='uniq_ciclo_por_ticket'),
        ]

    def __str__(self):
        return f"{self.ticket_id[:8]} #{self.numero_ciclo}"


class SlaAlertaDedupModel(models.Model):
    """
    Guarda write-once de alertas: existir a linha significa que o
    alerta já foi disparado para o ciclo.
    """

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='alertas_sla',
    )

    numero_ciclo = models.PositiveIntegerField()

    tipo_alerta = models.CharField(max_length=20, choices=TipoAlertaChoices.choices)

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'sla_alertas_dedup'
        constraints = [
            models.UniqueConstraint(
                fields=['ticket', 'numero_ciclo', 'tipo_alerta'],
                name='uniq_alerta_por_ciclo',
            ),
        ]


# =============================================================================
# Notificações
# =============================================================================

class NotificacaoModel(models.Model):

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    usuario_id = models.CharField(max_length=100, db_index=True)

    tipo = models.CharField(max_length=50, db_index=True)

    titulo = models.CharField(max_length=200)
    mensagem = models.TextField()
    link_url = models.CharField(max_length=500, blank=True, default='')
    dados = models.JSONField(default=dict, blank=True)

    lida = models.BooleanField(default=False)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'notificacoes'
        verbose_name = 'Notificação'
        verbose_name_plural = 'Notificações'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['usuario_id', 'lida'], name='notif_usuario_lida_idx'),
        ]


class ConfiguracaoNotificacaoModel(models.Model):
    """Chave global por tipo; tipo sem linha conta como habilitado."""

    tipo = models.CharField(max_length=50, primary_key=True)

    habilitada = models.BooleanField(default=True)

    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notificacao_configuracoes'
        verbose_name = 'Configuração de Notificação'
        verbose_name_plural = 'Configurações de Notificação'

    def __str__(self):
        return f"{self.tipo}: {'on' if self.habilitada else 'off'}"


# =============================================================================
# Event Store
# =============================================================================

class TicketEventoModel(models.Model):
    """
    Histórico de eventos de domínio por agregado.

    Alimenta a linha do tempo do chamado e permite replay/auditoria.
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento"
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do evento (ex: TicketReabertoEvent)"
    )

    aggregate_type = models.CharField(max_length=100, db_index=True)

    aggregate_id = models.CharField(max_length=36, db_index=True)

    event_data = models.JSONField(default=dict)

    version = models.IntegerField(default=1)

    sequence = models.BigIntegerField(
        default=0,
        help_text="Sequência do evento no agregado"
    )

    ator_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)

    occurred_at = models.DateTimeField()

    recorded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ticket_eventos'
        verbose_name = 'Evento de Chamado'
        verbose_name_plural = 'Eventos de Chamado'
        ordering = ['aggregate_id', 'sequence']
        constraints = [
            models.UniqueConstraint(fields=['aggregate_id', 'sequence'], name='uniq_evento_sequencia'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"

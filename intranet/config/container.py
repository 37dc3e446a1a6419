"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, relógio, diretório)
- Factory: Nova instância por chamada (services, UoW)

Imports são tardios (`_lazy`) para que o container possa ser importado
antes de o Django carregar os apps.
"""

from datetime import timedelta
from typing import Callable, Optional

from dependency_injector import containers, providers


def _lazy(module: str, name: str) -> Callable:
    """Construtor que importa `module.name` só na primeira chamada."""
    def construir(*args, **kwargs):
        return getattr(__import__(module, fromlist=[name]), name)(*args, **kwargs)
    construir.__name__ = name
    return construir


def _com_ciclo_vida(name: str) -> Callable:
    """
    Construtor de use case que compartilha o UoW com o CicloDeVidaTicket.

    O provider do ciclo de vida chega como `ciclo_vida_factory` e é
    chamado com o mesmo `uow` do serviço: eventos publicados pelo ciclo
    de vida entram na mesma transação.
    """
    servico = _lazy('intranet.core.tickets.use_cases', name)

    def construir(ciclo_vida_factory, uow, **deps):
        return servico(ciclo_vida=ciclo_vida_factory(uow=uow), uow=uow, **deps)
    construir.__name__ = name
    return construir


def _setting(name: str, default=None):
    from django.conf import settings
    return getattr(settings, name, default)


def _limiar_risco() -> timedelta:
    return timedelta(hours=float(_setting('SLA_RISK_THRESHOLD_HOURS', 4)))


REPOS = 'intranet.adapters.django_app.tickets.repositories'
SLA_REPOS = 'intranet.adapters.django_app.tickets.sla_repositories'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: Relógio, Event Store, Event Publisher, auditoria
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from intranet.config.container import get_container

        container = get_container()
        service = container.criar_ticket_service()
        result = service.execute(input_dto, ator)
    """

    # =========================================================================
    # Infrastructure
    # =========================================================================

    relogio = providers.Singleton(_lazy('intranet.core.shared.interfaces', 'RelogioSistema'))

    limiar_risco = providers.Callable(_limiar_risco)

    event_publisher = providers.Singleton(
        _lazy('intranet.adapters.django_app.events.publishers', 'get_event_publisher'),
        mode=providers.Callable(_setting, 'EVENT_PUBLISHER_MODE', 'sync'),
    )

    event_store = providers.Singleton(_lazy(REPOS, 'DjangoEventStore'))

    auditoria = providers.Singleton(_lazy(REPOS, 'LoggingAuditoriaSink'))

    diretorio = providers.Singleton(_lazy(REPOS, 'DjangoDiretorioUsuarios'))

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(_lazy(REPOS, 'DjangoTicketRepository'))
    comentario_repository = providers.Singleton(_lazy(REPOS, 'DjangoComentarioRepository'))
    anexo_repository = providers.Singleton(_lazy(REPOS, 'DjangoAnexoRepository'))
    categoria_repository = providers.Singleton(_lazy(REPOS, 'DjangoCategoriaRepository'))
    aprovacao_repository = providers.Singleton(_lazy(REPOS, 'DjangoAprovacaoRepository'))

    politica_repository = providers.Singleton(_lazy(SLA_REPOS, 'DjangoSlaPoliticaRepository'))
    ciclo_repository = providers.Singleton(_lazy(SLA_REPOS, 'DjangoCicloSlaRepository'))
    dedup_repository = providers.Singleton(_lazy(SLA_REPOS, 'DjangoAlertaDedupRepository'))
    notificacao_repository = providers.Singleton(_lazy(SLA_REPOS, 'DjangoNotificacaoRepository'))
    config_notificacao_repository = providers.Singleton(
        _lazy(SLA_REPOS, 'DjangoConfiguracaoNotificacaoRepository')
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('intranet.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Domain services
    # =========================================================================

    resolvedor_politica = providers.Singleton(
        _lazy('intranet.core.sla.politicas', 'ResolvedorPoliticaSla'),
        politica_repo=politica_repository,
    )

    resolvedores_aprovacao = providers.Singleton(
        _lazy('intranet.core.aprovacoes.resolvers', 'resolvedores_padrao'),
        diretorio=diretorio,
    )

    ciclo_vida = providers.Factory(
        _lazy('intranet.core.tickets.ciclo_vida', 'CicloDeVidaTicket'),
        ticket_repo=ticket_repository,
        ciclo_repo=ciclo_repository,
        aprovacao_repo=aprovacao_repository,
        resolvedor_politica=resolvedor_politica,
        uow=unit_of_work,
        limiar_risco=limiar_risco,
    )

    # =========================================================================
    # Services / Use Cases - Chamados
    # =========================================================================

    criar_ticket_service = providers.Factory(
        _com_ciclo_vida('CriarTicketService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        categoria_repo=categoria_repository,
        diretorio=diretorio,
        auditoria=auditoria,
        relogio=relogio,
        setor_destino_nome=providers.Callable(_setting, 'TICKETS_TARGET_SECTOR_NAME', 'Tech'),
    )

    atualizar_ticket_service = providers.Factory(
        _com_ciclo_vida('AtualizarTicketService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        categoria_repo=categoria_repository,
        auditoria=auditoria,
        relogio=relogio,
    )

    definir_responsaveis_service = providers.Factory(
        _com_ciclo_vida('DefinirResponsaveisService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        diretorio=diretorio,
        auditoria=auditoria,
        relogio=relogio,
    )

    adicionar_comentario_service = providers.Factory(
        _com_ciclo_vida('AdicionarComentarioService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
        auditoria=auditoria,
        relogio=relogio,
    )

    decidir_aprovacao_service = providers.Factory(
        _com_ciclo_vida('DecidirAprovacaoService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        aprovacao_repo=aprovacao_repository,
        ciclo_repo=ciclo_repository,
        categoria_repo=categoria_repository,
        resolvedores=resolvedores_aprovacao,
        auditoria=auditoria,
        relogio=relogio,
    )

    definir_prazo_manual_service = providers.Factory(
        _com_ciclo_vida('DefinirPrazoResolucaoManualService'),
        ciclo_vida_factory=ciclo_vida.provider,
        uow=unit_of_work,
        ticket_repo=ticket_repository,
        ciclo_repo=ciclo_repository,
        auditoria=auditoria,
        relogio=relogio,
    )

    adicionar_anexo_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'AdicionarAnexoService'),
        ticket_repo=ticket_repository,
        anexo_repo=anexo_repository,
        auditoria=auditoria,
        relogio=relogio,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    obter_ticket_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'ObterTicketService'),
        ticket_repo=ticket_repository,
        ciclo_vida=ciclo_vida,
        relogio=relogio,
    )

    listar_tickets_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'ListarTicketsService'),
        ticket_repo=ticket_repository,
    )

    listar_comentarios_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'ListarComentariosService'),
        ticket_repo=ticket_repository,
        comentario_repo=comentario_repository,
    )

    listar_anexos_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'ListarAnexosService'),
        ticket_repo=ticket_repository,
        anexo_repo=anexo_repository,
    )

    obter_aprovacao_service = providers.Factory(
        _lazy('intranet.core.tickets.use_cases', 'ObterAprovacaoService'),
        ticket_repo=ticket_repository,
        aprovacao_repo=aprovacao_repository,
        categoria_repo=categoria_repository,
        resolvedores=resolvedores_aprovacao,
    )

    # =========================================================================
    # Services / Use Cases - SLA e Notificações
    # =========================================================================

    listar_politicas_sla_service = providers.Factory(
        _lazy('intranet.core.sla.use_cases', 'ListarPoliticasSlaService'),
        politica_repo=politica_repository,
    )

    salvar_politica_sla_service = providers.Factory(
        _lazy('intranet.core.sla.use_cases', 'SalvarPoliticaSlaService'),
        politica_repo=politica_repository,
        uow=unit_of_work,
        auditoria=auditoria,
    )

    varredura_sla_service = providers.Factory(
        _lazy('intranet.core.sla.use_cases', 'VarreduraEscalonamentoSlaService'),
        ticket_repo=ticket_repository,
        ciclo_repo=ciclo_repository,
        dedup_repo=dedup_repository,
        notificacao_repo=notificacao_repository,
        config_repo=config_notificacao_repository,
        diretorio=diretorio,
        relogio=relogio,
        uow=unit_of_work,
        limiar_risco=limiar_risco,
    )

    definir_configuracao_notificacao_service = providers.Factory(
        _lazy('intranet.core.notificacoes.use_cases', 'DefinirConfiguracaoNotificacaoService'),
        config_repo=config_notificacao_repository,
        auditoria=auditoria,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None

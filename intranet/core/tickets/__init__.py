"""
Domínio de Tickets - Helpdesk interno.

Este módulo contém a lógica de negócio dos chamados:
- Entidades (TicketEntity, TicketStatus, TRANSICOES)
- Ciclo de vida (efeitos das transições no SLA)
- Use Cases expostos à camada de requisição
- Domain Events (histórico do chamado)
- DTOs e Ports

Características do Domínio:
- Status como enum fechado com tabela explícita de transições
- Um ciclo de SLA por tentativa de resolução (reabertura abre outro)
- Aprovação por categoria pausa o relógio de SLA
"""

from .entities import (
    TicketEntity,
    TicketStatus,
    TRANSICOES,
    STATUS_ATIVOS,
    ComentarioEntity,
    AnexoEntity,
    CategoriaEntity,
)
from .ciclo_vida import CicloDeVidaTicket
from .dtos import (
    CriarTicketInputDTO,
    AtualizarTicketInputDTO,
    DefinirResponsaveisInputDTO,
    AdicionarComentarioInputDTO,
    AdicionarAnexoInputDTO,
    DecidirAprovacaoInputDTO,
    DefinirPrazoManualInputDTO,
    TicketOutputDTO,
    TicketListItemDTO,
)
from .ports import TicketRepository, ComentarioRepository, AnexoRepository, CategoriaRepository
from .use_cases import (
    CriarTicketService,
    AtualizarTicketService,
    DefinirResponsaveisService,
    AdicionarComentarioService,
    ListarComentariosService,
    AdicionarAnexoService,
    ListarAnexosService,
    DecidirAprovacaoService,
    ObterAprovacaoService,
    DefinirPrazoResolucaoManualService,
    ObterTicketService,
    ListarTicketsService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TRANSICOES",
    "STATUS_ATIVOS",
    "ComentarioEntity",
    "AnexoEntity",
    "CategoriaEntity",
    "CicloDeVidaTicket",
    # DTOs
    "CriarTicketInputDTO",
    "AtualizarTicketInputDTO",
    "DefinirResponsaveisInputDTO",
    "AdicionarComentarioInputDTO",
    "AdicionarAnexoInputDTO",
    "DecidirAprovacaoInputDTO",
    "DefinirPrazoManualInputDTO",
    "TicketOutputDTO",
    "TicketListItemDTO",
    # Ports
    "TicketRepository",
    "ComentarioRepository",
    "AnexoRepository",
    "CategoriaRepository",
    # Use Cases
    "CriarTicketService",
    "AtualizarTicketService",
    "DefinirResponsaveisService",
    "AdicionarComentarioService",
    "ListarComentariosService",
    "AdicionarAnexoService",
    "ListarAnexosService",
    "DecidirAprovacaoService",
    "ObterAprovacaoService",
    "DefinirPrazoResolucaoManualService",
    "ObterTicketService",
    "ListarTicketsService",
]

"""
API Views JSON do helpdesk.

Endpoints (prefixo /tickets/api/):
- GET/POST   /                               - Listar / abrir chamado
- GET/PATCH  /<id>/                          - Obter / atualizar (admin: status, prioridade, categoria)
- PUT        /<id>/responsaveis/             - Substituir responsáveis (admin)
- GET/POST   /<id>/comentarios/              - Listar / comentar
- GET/POST   /<id>/anexos/                   - Listar / registrar anexo
- GET        /<id>/aprovacao/                - Estado da aprovação
- POST       /<id>/aprovacao/decisao/        - Aprovar / rejeitar
- PUT        /<id>/sla/prazo/                - Prazo de resolução manual (admin)
- GET/PUT    /sla/politicas/                 - Políticas de SLA
- PUT        /notificacoes/configuracoes/<tipo>/ - Chave global de notificação (admin)

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do Django; admin = `is_staff`
"""

import json
import logging
from typing import Any, Dict, List

from django.http import HttpRequest, JsonResponse
from django.utils.dateparse import parse_datetime
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from intranet.config.container import get_container
from intranet.core.shared.dtos import AtorDTO
from intranet.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    ConcurrencyError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from intranet.core.sla.dtos import SalvarPoliticaSlaInputDTO
from intranet.core.tickets.dtos import (
    AdicionarAnexoInputDTO,
    AdicionarComentarioInputDTO,
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    DecidirAprovacaoInputDTO,
    DefinirPrazoManualInputDTO,
    DefinirResponsaveisInputDTO,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Decorators e Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou se o corpo não é um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")
    return data


def get_ator(request: HttpRequest) -> AtorDTO:
    """
    Ator da requisição a partir do usuário da sessão.

    Raises:
        AuthorizationError: Requisição sem usuário autenticado
    """
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        raise AuthorizationError("Autenticação necessária")
    return AtorDTO(id=str(user.pk), e_admin=bool(user.is_staff))


def _inteiro(data: Dict, campo: str) -> int:
    try:
        return int(data[campo])
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f"{campo} deve ser um número inteiro", field=campo)


def _lista_ids(data: Dict, campo: str) -> tuple:
    valor = data.get(campo, [])
    if not isinstance(valor, list):
        raise ValidationError(f"{campo} deve ser uma lista", field=campo)
    return tuple(str(v) for v in valor)


def _to_dict_list(itens: List) -> List[Dict]:
    return [i.to_dict() for i in itens]


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        ValidationError 400, AuthorizationError 403, EntityNotFoundError 404,
        ConcurrencyError 409, BusinessRuleViolationError 422, demais 500.
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, AuthorizationError):
            return json_response(success=False, error=str(e), status=403)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=str(e), status=404)

        if isinstance(e, ConcurrencyError):
            return json_response(success=False, error=str(e), status=409)

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': getattr(e, 'rule', None)}
            )

        if isinstance(e, DomainException):
            return json_response(success=False, error=str(e), status=400)

        if isinstance(e, ValueError):
            return json_response(success=False, error=str(e), status=400)

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Chamados
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    GET /tickets/api/ - Lista chamados visíveis (?status=)
    POST /tickets/api/ - Abre chamado
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            ator = get_ator(request)
            tickets = self.get_service('listar_tickets_service').execute(
                ator,
                status=request.GET.get('status') or None,
            )
            return json_response(
                success=True,
                data=_to_dict_list(tickets),
                meta={'total': len(tickets)},
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "titulo": "string (obrigatório)",
            "descricao": "string (obrigatório)",
            "prioridade": "BAIXA|MEDIA|ALTA|URGENTE (opcional)",
            "setor_solicitante_id": "string (opcional)",
            "categoria_id": "string (opcional)",
            "tags": ["string"] (opcional)
        }
        """
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = CriarTicketInputDTO(
                titulo=data.get('titulo', ''),
                descricao=data.get('descricao', ''),
                prioridade=data.get('prioridade') or 'MEDIA',
                setor_solicitante_id=data.get('setor_solicitante_id'),
                categoria_id=data.get('categoria_id'),
                tags=_lista_ids(data, 'tags'),
            )

            output = self.get_service('criar_ticket_service').execute(input_dto, ator)

            logger.info(f"API: Chamado criado: {output.id}")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """
    GET /tickets/api/<id>/ - Detalhe com ciclo e estado de SLA
    PATCH /tickets/api/<id>/ - Atualização combinada (admin)
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ticket = self.get_service('obter_ticket_service').execute(pk, get_ator(request))
            return json_response(success=True, data=ticket.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """
        Body JSON (todos opcionais):
        {
            "status": "ABERTO|EM_ANDAMENTO|...",
            "prioridade": "BAIXA|MEDIA|ALTA|URGENTE",
            "categoria_id": "string ou null"
        }
        """
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = AtualizarTicketInputDTO(
                ticket_id=pk,
                status=data.get('status'),
                prioridade=data.get('prioridade'),
                categoria_id=data.get('categoria_id'),
                alterar_categoria='categoria_id' in data,
            )

            output = self.get_service('atualizar_ticket_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIResponsaveisView(BaseAPIView):
    """PUT /tickets/api/<id>/responsaveis/ {"usuario_ids": [...]}"""

    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = DefinirResponsaveisInputDTO(
                ticket_id=pk,
                usuario_ids=_lista_ids(data, 'usuario_ids'),
            )
            output = self.get_service('definir_responsaveis_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIComentariosView(BaseAPIView):
    """
    GET /tickets/api/<id>/comentarios/ - Internos só para admin
    POST /tickets/api/<id>/comentarios/ {"corpo": "...", "interno": false}
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            comentarios = self.get_service('listar_comentarios_service').execute(pk, get_ator(request))
            return json_response(success=True, data=_to_dict_list(comentarios))

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = AdicionarComentarioInputDTO(
                ticket_id=pk,
                corpo=data.get('corpo', ''),
                interno=bool(data.get('interno', False)),
            )
            output = self.get_service('adicionar_comentario_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAnexosView(BaseAPIView):
    """
    GET /tickets/api/<id>/anexos/
    POST /tickets/api/<id>/anexos/ - Metadados; o arquivo já foi enviado ao storage
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            anexos = self.get_service('listar_anexos_service').execute(pk, get_ator(request))
            return json_response(success=True, data=_to_dict_list(anexos))

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = AdicionarAnexoInputDTO(
                ticket_id=pk,
                nome_arquivo=data.get('nome_arquivo', ''),
                caminho=data.get('caminho', ''),
                tamanho_bytes=_inteiro(data, 'tamanho_bytes'),
                content_type=data.get('content_type'),
            )
            output = self.get_service('adicionar_anexo_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIAprovacaoView(BaseAPIView):
    """GET /tickets/api/<id>/aprovacao/"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('obter_aprovacao_service').execute(pk, get_ator(request))
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDecisaoAprovacaoView(BaseAPIView):
    """POST /tickets/api/<id>/aprovacao/decisao/ {"aprovar": true, "observacao": "..."}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            if not isinstance(data.get('aprovar'), bool):
                raise ValidationError("aprovar deve ser true ou false", field="aprovar")

            input_dto = DecidirAprovacaoInputDTO(
                ticket_id=pk,
                aprovar=data['aprovar'],
                observacao=data.get('observacao'),
            )
            output = self.get_service('decidir_aprovacao_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIPrazoSlaView(BaseAPIView):
    """PUT /tickets/api/<id>/sla/prazo/ {"resolucao_ate": "ISO-8601 com offset", "motivo": "..."}"""

    def put(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            resolucao_ate = parse_datetime(data.get('resolucao_ate') or '')
            if resolucao_ate is None:
                raise ValidationError("resolucao_ate deve ser uma data ISO-8601", field="resolucao_ate")

            input_dto = DefinirPrazoManualInputDTO(
                ticket_id=pk,
                resolucao_ate=resolucao_ate,
                motivo=data.get('motivo'),
            )
            output = self.get_service('definir_prazo_manual_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# SLA e Notificações
# =============================================================================

class SlaPoliticaAPIView(BaseAPIView):
    """
    GET /tickets/api/sla/politicas/
    PUT /tickets/api/sla/politicas/ - Upsert pela prioridade (admin)
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            get_ator(request)
            politicas = self.get_service('listar_politicas_sla_service').execute()
            return json_response(success=True, data=_to_dict_list(politicas))

        except Exception as e:
            return self.handle_exception(e)

    def put(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "prioridade": "ALTA",
            "minutos_primeira_resposta": 60,
            "minutos_resolucao": 480,
            "nome": "SLA Alta (opcional)",
            "ativa": true
        }
        """
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            input_dto = SalvarPoliticaSlaInputDTO(
                prioridade=data.get('prioridade', ''),
                minutos_primeira_resposta=_inteiro(data, 'minutos_primeira_resposta'),
                minutos_resolucao=_inteiro(data, 'minutos_resolucao'),
                nome=data.get('nome') or '',
                ativa=bool(data.get('ativa', True)),
            )
            output = self.get_service('salvar_politica_sla_service').execute(input_dto, ator)
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class ConfiguracaoNotificacaoAPIView(BaseAPIView):
    """PUT /tickets/api/notificacoes/configuracoes/<tipo>/ {"habilitada": false}"""

    def put(self, request: HttpRequest, tipo: str) -> JsonResponse:
        try:
            ator = get_ator(request)
            data = self.parse_body(request)

            if not isinstance(data.get('habilitada'), bool):
                raise ValidationError("habilitada deve ser true ou false", field="habilitada")

            resultado = self.get_service('definir_configuracao_notificacao_service').execute(
                tipo, data['habilitada'], ator
            )
            return json_response(success=True, data=resultado)

        except Exception as e:
            return self.handle_exception(e)

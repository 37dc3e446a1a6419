"""
Exceções de Domínio do Portal Intranet.

Erros tipados que atravessam as camadas sem depender de framework.
A borda HTTP traduz cada tipo para um status (ver api_views).

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada inválida ou operação bloqueada pelo estado)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    ├── ConcurrencyError (conflito entre requisições simultâneas)
    └── AuthorizationError (ator sem permissão para a operação)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Example:
        try:
            servico.execute(dto, ator)
        except DomainException as e:
            logger.warning(f"Operação recusada: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (resposta JSON)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Dados de entrada inválidos para a operação.

    Example:
        if not corpo.strip():
            raise ValidationError("Comentário vazio", field="corpo")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(
                f"Chamado {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket_id,
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    O campo `rule` identifica a regra de forma estável para clientes.

    Example:
        raise BusinessRuleViolationError(
            "Aprovação já foi decidida",
            rule="aprovacao_ja_decidida",
        )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConcurrencyError(DomainException):
    """
    Conflito entre operações concorrentes.

    Lançada quando outra requisição alterou o mesmo agregado primeiro,
    por exemplo duas reaberturas disputando o mesmo número de ciclo.
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")


class AuthorizationError(DomainException):
    """
    Ator não tem permissão para executar a operação.

    Example:
        if not ator.e_admin:
            raise AuthorizationError("Operação exclusiva de administradores")
    """

    def __init__(self, message: str):
        super().__init__(message, "FORBIDDEN")

"""
trust_broker/errors.py — Taxonomia de erros do broker.

Cada erro sabe o próprio status HTTP e como virar corpo JSON.
Os detalhes de mismatch do /validate NUNCA entram aqui: ficam só no log.
"""
from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: list[str] = []


class BrokerError(Exception):
    """Base de todos os erros esperados do broker."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[list[str]] = None):
        self.code = code
        self.message = message
        self.details = details or []
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.message, code=self.code, details=self.details)


class ValidationError(BrokerError):
    """Entrada ausente ou malformada."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[list[str]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class MissingParametersError(ValidationError):
    """Lista exatamente os parâmetros que faltaram. Não vaza estado secreto."""

    def __init__(self, missing: list[str]):
        super().__init__(
            "Missing required parameters",
            [f"{name} is required" for name in missing],
        )
        self.code = "MISSING_PARAMETERS"
        self.missing = list(missing)


class ForbiddenError(BrokerError):
    """Identidade ou credencial não confere com o registro."""

    status_code = 403

    def __init__(self, message: str = "Forbidden", code: str = "FORBIDDEN"):
        super().__init__(code, message)


class NotFoundError(BrokerError):
    """Nenhum token vivo encontrado."""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__("NOT_FOUND", message)


class InfrastructureError(BrokerError):
    """Falha do banco/transação. A mensagem do driver não sai daqui."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__("INFRASTRUCTURE_ERROR", message)

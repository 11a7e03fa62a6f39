"""
trust_broker/controllers/validation_controller.py — Validação de api_keys apresentados.

Quando um serviço recebe uma request de outro, ele manda as credenciais
para cá. Resposta é sempre um veredito (valid true/false), nunca exceção
de negócio. O motivo exato de um mismatch vai só para o log.
"""
from datetime import datetime
from typing import Optional

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.controllers.service_controller import ServiceController
from trust_broker.database import unit_of_work
from trust_broker.errors import NotFoundError
from trust_broker.models.api_token import ApiToken
from trust_broker.services.keys import short, utcnow

ACCESS_DENIED = "access denied"
INVALID_OR_EXPIRED = "Invalid or expired key"


class ValidateRequest(BaseModel):
    validator_project: Optional[str] = None
    validator_url: Optional[str] = None
    validator_base_key: Optional[str] = None
    requester_project: Optional[str] = None
    requester_api_key: Optional[str] = None
    requester_url: Optional[str] = None


class ValidationResult(BaseModel):
    valid: bool
    requester: Optional[str] = None
    error: Optional[str] = None


def mismatch_reasons(token: ApiToken, data: ValidateRequest) -> list[str]:
    """Compara os 4 campos do token com o que foi apresentado."""
    checks = [
        ("Target", data.validator_project, token.target),
        ("Target URL", data.validator_url, token.target_url),
        ("Requester", data.requester_project, token.requester),
        ("Requester URL", data.requester_url, token.requester_url),
    ]
    return [
        f"{label} mismatch: expected {expected}, got {stored}"
        for label, expected, stored in checks
        if expected != stored
    ]


class ValidationController:

    @staticmethod
    async def _live_token(db: AsyncSession, api_key: str | None) -> ApiToken:
        if not api_key:
            raise NotFoundError("No tokens found")
        result = await db.execute(
            select(ApiToken).where(
                ApiToken.api_key == api_key,
                ApiToken.expires_at > utcnow(),
            )
        )
        token = result.scalar_one_or_none()
        if not token:
            raise NotFoundError("No tokens found")
        return token

    @staticmethod
    async def validate(db: AsyncSession, data: ValidateRequest) -> ValidationResult:
        """Só leitura: a transação existe para leitura consistente."""
        logger.debug(
            f"🔍 Validação: validator={data.validator_project} ({data.validator_url}) "
            f"requester={data.requester_project} ({data.requester_url}) "
            f"api_key={short(data.requester_api_key)}"
        )

        async with unit_of_work(db):
            validator = await ServiceController.find_by_project(db, data.validator_project)
            if (
                not validator
                or validator.url != data.validator_url
                or validator.base_key != data.validator_base_key
            ):
                logger.warning(f"⛔ Validator project/url/key mismatch: {data.validator_project}")
                return ValidationResult(valid=False, error=ACCESS_DENIED)

            try:
                token = await ValidationController._live_token(db, data.requester_api_key)
            except NotFoundError as e:
                logger.warning(f"⛔ Validação falhou: {e.message}")
                return ValidationResult(valid=False, error=INVALID_OR_EXPIRED)

            reasons = mismatch_reasons(token, data)
            if reasons:
                logger.warning(f"⛔ Validação falhou: {', '.join(reasons)}")
                return ValidationResult(valid=False, error=INVALID_OR_EXPIRED)

        logger.debug(f"✅ api_key validado: {token.requester} → {token.target}")
        return ValidationResult(valid=True, requester=token.requester)

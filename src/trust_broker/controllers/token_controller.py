"""
trust_broker/controllers/token_controller.py — Emissão de api_keys entre serviços.

Fluxo do /get-token:
  1. Confere os 5 parâmetros antes de tocar no banco
  2. Requester precisa existir com a mesma url E a base_key atual
  3. Target precisa existir com a mesma url
  4. Já existe token vivo para (target, requester, target_url)? → devolve o mesmo
  5. Senão, gera um novo a partir da base_key do target
"""
from datetime import datetime
from typing import Optional

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.controllers.service_controller import ServiceController
from trust_broker.database import unit_of_work
from trust_broker.errors import ForbiddenError, MissingParametersError
from trust_broker.models.api_token import ApiToken
from trust_broker.services.keys import derive_api_key, short, token_expiry, utcnow


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class IssueRequest(BaseModel):
    requester_project: Optional[str] = None
    requester_url: Optional[str] = None
    requester_base_key: Optional[str] = None
    target_project: Optional[str] = None
    target_url: Optional[str] = None

    def missing(self) -> list[str]:
        """Nomes (como o chamador os envia) dos parâmetros ausentes ou vazios."""
        fields = [
            ("x-project-id header", self.requester_project),
            ("x-project-domain-name header", self.requester_url),
            ("x-api-key header", self.requester_base_key),
            ("body.targetProject", self.target_project),
            ("body.targetUrl", self.target_url),
        ]
        return [name for name, value in fields if not value]


class IssuedToken(BaseModel):
    api_key: str
    expires_at: datetime


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class TokenController:

    @staticmethod
    async def issue(db: AsyncSession, data: IssueRequest, ttl_hours: int) -> IssuedToken:
        """
        Emite (ou reaproveita) o api_key para requester → target.
        Lança MissingParametersError ou ForbiddenError; qualquer falha
        dentro da transação faz rollback de tudo.
        """
        missing = data.missing()
        if missing:
            raise MissingParametersError(missing)

        async with unit_of_work(db):
            requester = await ServiceController.find_by_project(db, data.requester_project)
            if (
                not requester
                or requester.url != data.requester_url
                or requester.base_key != data.requester_base_key
            ):
                logger.warning(
                    f"⛔ Requester mismatch: {data.requester_project} | "
                    f"url [req] {data.requester_url} [db] {requester.url if requester else None} | "
                    f"base_key [req] {short(data.requester_base_key)} "
                    f"[db] {short(requester.base_key) if requester else None}"
                )
                raise ForbiddenError(
                    "Requester not registered or URL mismatch or base key rotten",
                    code="REQUESTER_MISMATCH",
                )

            target = await ServiceController.find_by_project(db, data.target_project)
            if not target or target.url != data.target_url:
                logger.warning(f"⛔ Target mismatch: {data.target_project} ({data.target_url})")
                raise ForbiddenError("Invalid target or URL mismatch", code="TARGET_MISMATCH")

            result = await db.execute(
                select(ApiToken)
                .where(
                    ApiToken.target == data.target_project,
                    ApiToken.requester == data.requester_project,
                    ApiToken.target_url == data.target_url,
                    ApiToken.expires_at > utcnow(),
                )
                .order_by(ApiToken.expires_at.desc())
            )
            existing = result.scalars().first()
            if existing:
                logger.debug(
                    f"♻️ Token existente reaproveitado: {data.requester_project} → {data.target_project}"
                )
                return IssuedToken(api_key=existing.api_key, expires_at=existing.expires_at)

            token = ApiToken(
                target=data.target_project,
                requester=data.requester_project,
                api_key=derive_api_key(target.base_key, data.requester_project),
                target_url=data.target_url,
                requester_url=data.requester_url,
                expires_at=token_expiry(ttl_hours),
            )
            db.add(token)

        logger.info(
            f"🔑 Token emitido: {data.requester_project} → {data.target_project} "
            f"(expira {token.expires_at.isoformat()})"
        )
        return IssuedToken(api_key=token.api_key, expires_at=token.expires_at)

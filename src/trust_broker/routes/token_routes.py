"""
trust_broker/routes/token_routes.py — POST /get-token

Antes de chamar outro serviço, o backend pede um api_key para ele.

Headers: X-Project-Id, X-Project-Domain-Name, X-Api-Key (quem vai chamar)
Body:    { "targetProject": "...", "targetUrl": "..." } (quem vai ser chamado)

Resposta: { "apiKey": "...", "expiresAt": "..." }
"""
from datetime import timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.config import settings
from trust_broker.controllers.token_controller import IssueRequest, TokenController
from trust_broker.database import get_db
from trust_broker.middlewares.identity import ServiceIdentity, service_identity

router = APIRouter(tags=["Tokens"])


class TokenBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_project: Optional[str] = Field(None, alias="targetProject")
    target_url: Optional[str] = Field(None, alias="targetUrl")


@router.post("/get-token", summary="Obter api_key para chamar outro serviço")
async def get_token(
    body: Optional[TokenBody] = None,
    identity: ServiceIdentity = Depends(service_identity),
    db: AsyncSession = Depends(get_db),
):
    body = body or TokenBody()
    issued = await TokenController.issue(
        db,
        IssueRequest(
            requester_project=identity.project,
            requester_url=identity.url,
            requester_base_key=identity.base_key,
            target_project=body.target_project,
            target_url=body.target_url,
        ),
        ttl_hours=settings.TOKEN_TTL_HOURS,
    )
    # Instante UTC explícito: as colunas guardam UTC naive
    expires_at = issued.expires_at.replace(tzinfo=timezone.utc)
    return {"apiKey": issued.api_key, "expiresAt": expires_at.isoformat()}

"""
trust_broker/routes/validate_routes.py — POST /validate

Quando um serviço recebe uma request de outro, manda as credenciais para cá.

Headers: X-Project-Id, X-Project-Domain-Name, X-Api-Key (quem valida)
Body:    { "requesterProject", "requesterApiKey", "requesterUrl" }

200 { "valid": true, "requester": "..." }
403 { "valid": false, "error": "..." }
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.controllers.validation_controller import ValidateRequest, ValidationController
from trust_broker.database import get_db
from trust_broker.middlewares.identity import ServiceIdentity, service_identity

router = APIRouter(tags=["Tokens"])


class ValidateBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requester_project: Optional[str] = Field(None, alias="requesterProject")
    requester_api_key: Optional[str] = Field(None, alias="requesterApiKey")
    requester_url: Optional[str] = Field(None, alias="requesterUrl")


@router.post("/validate", summary="Validar api_key apresentado por outro serviço")
async def validate(
    body: Optional[ValidateBody] = None,
    identity: ServiceIdentity = Depends(service_identity),
    db: AsyncSession = Depends(get_db),
):
    body = body or ValidateBody()
    result = await ValidationController.validate(
        db,
        ValidateRequest(
            validator_project=identity.project,
            validator_url=identity.url,
            validator_base_key=identity.base_key,
            requester_project=body.requester_project,
            requester_api_key=body.requester_api_key,
            requester_url=body.requester_url,
        ),
    )
    if not result.valid:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"valid": False, "error": result.error},
        )
    return {"valid": True, "requester": result.requester}

"""
trust_broker/routes/register_routes.py — POST /register

Cada backend se registra no build e renova a chave no rebuild.

    {
      "project": "@back",                 // identificador do backend
      "url": "http://localhost:3202"      // de onde ele faz as requests
    }

Resposta: { "baseKey": "..." }, usar como X-Api-Key até o próximo registro.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.config import settings
from trust_broker.controllers.service_controller import ServiceController
from trust_broker.database import get_db

router = APIRouter(tags=["Registry"])


class RegisterRequest(BaseModel):
    project: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


@router.post("/register", summary="Registrar serviço e rotacionar base_key")
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    base_key = await ServiceController.register(db, body.project, body.url, settings.SECRET_SALT)
    return {"baseKey": base_key}

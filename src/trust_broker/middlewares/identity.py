"""
trust_broker/middlewares/identity.py — Identidade do serviço chamador.

Todo serviço que chama /get-token ou /validate se identifica por headers:
  X-Project-Id          → project (ex: "au@back")
  X-Project-Domain-Name → url de onde a request sai
  X-Api-Key             → base_key recebida no /register

Nenhum header é obrigatório aqui: quem decide o que falta é o controller,
para poder listar todos os ausentes de uma vez.
"""
from typing import Optional

from fastapi import Header
from pydantic import BaseModel


class ServiceIdentity(BaseModel):
    project: Optional[str] = None
    url: Optional[str] = None
    base_key: Optional[str] = None


async def service_identity(
    x_project_id: Optional[str] = Header(None, alias="X-Project-Id"),
    x_project_domain_name: Optional[str] = Header(None, alias="X-Project-Domain-Name"),
    x_api_key: Optional[str] = Header(None, alias="X-Api-Key"),
) -> ServiceIdentity:
    return ServiceIdentity(project=x_project_id, url=x_project_domain_name, base_key=x_api_key)

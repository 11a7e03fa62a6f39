"""
trust_broker/controllers/service_controller.py — Registro e rotação de serviços.

Cada backend chama /register no build. Primeiro registro do par
(project, url) cria o registro; os seguintes só rotacionam a base_key.
"""
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trust_broker.database import unit_of_work
from trust_broker.models.backend_service import BackendService
from trust_broker.services.keys import derive_base_key, short, utcnow


class ServiceController:

    @staticmethod
    async def register(
        db: AsyncSession,
        project: str,
        url: str,
        secret_salt: str,
    ) -> str:
        """
        Registra (ou rotaciona) o serviço e retorna a nova base_key.
        O chamador deve usar essa chave até o próximo registro.
        """
        base_key = derive_base_key(url, secret_salt)

        async with unit_of_work(db):
            # Busca pelo par exato, outra url = outro registro
            result = await db.execute(
                select(BackendService).where(
                    BackendService.project == project,
                    BackendService.url == url,
                )
            )
            service = result.scalars().first()

            if service:
                service.base_key = base_key
                service.updated_at = utcnow()
                logger.info(f"🔄 base_key rotacionada: {project} ({url}) → {short(base_key)}")
            else:
                db.add(BackendService(project=project, url=url, base_key=base_key))
                logger.info(f"🆕 Serviço registrado: {project} ({url})")

        return base_key

    @staticmethod
    async def find_by_project(db: AsyncSession, project: str | None) -> BackendService | None:
        """
        Registro mais antigo do project. Se o project tiver mais de uma url
        registrada, vale o primeiro registro criado.
        """
        if not project:
            return None
        result = await db.execute(
            select(BackendService)
            .where(BackendService.project == project)
            .order_by(BackendService.id)
        )
        return result.scalars().first()

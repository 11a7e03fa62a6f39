"""
trust_broker/models/backend_service.py — Serviços registrados no broker.

Cada backend se registra no build e rotaciona a base_key a cada rebuild.
A chave de busca no registro é o PAR (project, url): o mesmo project
registrado com outra url vira um registro NOVO, não atualiza o antigo.
"""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from trust_broker.database import Base
from trust_broker.services.keys import utcnow


class BackendService(Base):
    __tablename__ = "backend_services"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(255), nullable=False)

    # Segredo rotativo atual, prova de registro vivo
    base_key: Mapped[str] = mapped_column(String(64), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

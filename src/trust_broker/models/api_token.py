"""
trust_broker/models/api_token.py — Tokens bearer entre serviços.

Um token vale para exatamente uma tupla
(target, requester, target_url, requester_url) até expires_at.
Imutável depois de criado; nunca é apagado, só para de valer com o tempo.
"""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from trust_broker.database import Base
from trust_broker.services.keys import utcnow


class ApiToken(Base):
    __tablename__ = "api_tokens"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    target: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    requester: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    api_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    target_url: Mapped[str] = mapped_column(String(255), nullable=False)
    requester_url: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

"""
trust_broker/services/keys.py — Derivação de base_key e api_key.

SHA-256 sobre "parte-parte-parte". O segredo do processo entra como
argumento explícito: estes helpers não leem settings.
"""
import hashlib
import time
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """UTC naive, o mesmo formato gravado nas colunas DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _sha256(*parts: str) -> str:
    return hashlib.sha256("-".join(parts).encode()).hexdigest()


def derive_base_key(url: str, secret_salt: str, now_ns: int | None = None) -> str:
    """base_key = SHA-256(url, instante atual em ns, segredo do processo)."""
    return _sha256(url, str(now_ns or time.time_ns()), secret_salt)


def derive_api_key(target_base_key: str, requester: str, now_ns: int | None = None) -> str:
    """
    api_key = SHA-256(base_key do target, requester, instante atual).

    Fixado no momento da emissão: rotacionar a base_key do target depois
    NÃO invalida os tokens já emitidos.
    """
    return _sha256(target_base_key, requester, str(now_ns or time.time_ns()))


def token_expiry(ttl_hours: int, now: datetime | None = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=ttl_hours)


def short(key: str | None) -> str:
    """Prefixo para log, nunca logar a chave inteira."""
    if not key:
        return "<vazio>"
    return f"{key[:8]}…"

"""
trust_broker/client.py — SDK para backends falarem com o Trust Broker.

USO BÁSICO:

    from trust_broker.client import TrustBrokerClient

    broker = TrustBrokerClient(
        base_url="http://trust-broker:3000",
        project="au@back",
        url="http://localhost:3202",
    )

    # No build/startup: guarda a base_key nova
    await broker.register()

    # Antes de chamar outro serviço
    token = await broker.get_token("pay@back", "http://localhost:3303")
    # → {"apiKey": "...", "expiresAt": "..."}

    # Ao receber uma request de outro serviço
    verdict = await broker.validate("au@back", api_key_recebido, "http://localhost:3202")
    # → {"valid": True, "requester": "au@back"} ou {"valid": False, "error": "..."}
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx


class TrustBrokerClient:
    """
    Client assíncrono para o Trust Broker.

    Os api_keys ficam em cache por (target_project, target_url) até
    5 minutos antes de expirar, o serviço não precisa gerenciar tokens.
    """

    def __init__(
        self,
        base_url: str,
        project: str,
        url: str,
        base_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.project = project
        self.url = url
        self.base_key = base_key
        self._transport = transport
        self._tokens: dict[tuple[str, str], tuple[dict, datetime]] = {}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=10)

    def identity_headers(self) -> dict:
        return {
            "X-Project-Id": self.project,
            "X-Project-Domain-Name": self.url,
            "X-Api-Key": self.base_key or "",
        }

    # ------------------------------------------------------------------
    # Registro
    # ------------------------------------------------------------------

    async def register(self) -> str:
        """Registra este serviço e guarda a base_key nova. Invalida o cache."""
        async with self._client() as client:
            resp = await client.post("/register", json={"project": self.project, "url": self.url})
            resp.raise_for_status()
            self.base_key = resp.json()["baseKey"]
        self._tokens.clear()
        return self.base_key

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def get_token(self, target_project: str, target_url: str) -> dict:
        """Retorna {apiKey, expiresAt} para chamar o target; usa o cache se ainda vale."""
        now = datetime.now(timezone.utc)
        cached = self._tokens.get((target_project, target_url))
        if cached and now < cached[1] - timedelta(minutes=5):
            return cached[0]

        async with self._client() as client:
            resp = await client.post(
                "/get-token",
                headers=self.identity_headers(),
                json={"targetProject": target_project, "targetUrl": target_url},
            )
            resp.raise_for_status()
            data = resp.json()

        expires_at = datetime.fromisoformat(data["expiresAt"])
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        self._tokens[(target_project, target_url)] = (data, expires_at)
        return data

    async def validate(self, requester_project: str, requester_api_key: str, requester_url: str) -> dict:
        """
        Pergunta ao broker se o api_key recebido vale para este serviço.
        403 é um veredito (valid=False), não erro. Só outros status levantam.
        """
        async with self._client() as client:
            resp = await client.post(
                "/validate",
                headers=self.identity_headers(),
                json={
                    "requesterProject": requester_project,
                    "requesterApiKey": requester_api_key,
                    "requesterUrl": requester_url,
                },
            )
        if resp.status_code != 403:
            resp.raise_for_status()
        return resp.json()

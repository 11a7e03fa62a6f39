from trust_broker.models.backend_service import BackendService
from trust_broker.models.api_token import ApiToken

__all__ = ["BackendService", "ApiToken"]

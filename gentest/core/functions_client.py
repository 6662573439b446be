from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
import structlog

logger = structlog.get_logger()


@dataclass
class FunctionsError:
    message: str
    status_code: Optional[int] = None


@dataclass
class FunctionResponse:
    data: Any = None
    error: Optional[FunctionsError] = None


class FunctionsClient:
    """Invokes deployed generation functions by name over HTTP.

    Mirrors the ``{data, error}`` contract of a backend-as-a-service function
    invoke: transport failures and non-2xx answers come back as ``error``
    (never raised), 2xx bodies come back as ``data``. A body that is not JSON
    is handed back as text.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.headers = headers or {}
        self.transport = transport

    def with_headers(self, headers: Dict[str, str]) -> "FunctionsClient":
        """Copy of this client that also sends ``headers`` on every invocation"""
        return FunctionsClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={**self.headers, **headers},
            transport=self.transport,
        )

    async def invoke(self, name: str, body: Dict[str, Any]) -> FunctionResponse:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    f"/{name}",
                    json=body,
                    headers={"Content-Type": "application/json", **self.headers},
                )
        except httpx.HTTPError as e:
            logger.error("Function invocation failed", function=name, error=str(e))
            return FunctionResponse(error=FunctionsError(f"Falha ao invocar a função {name}: {e}"))

        if response.is_error:
            message = self._error_message(response)
            logger.error("Function returned an error", function=name, status_code=response.status_code, error=message)
            return FunctionResponse(error=FunctionsError(message, response.status_code))

        return FunctionResponse(data=self._decode(response))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(payload, dict):
            message = payload.get("error") or payload.get("detail")
            if isinstance(message, str) and message:
                return message
        return f"HTTP {response.status_code}"

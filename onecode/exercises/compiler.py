"""
Client for the remote code execution service

POST <COMPILER_URL>/<route> {"code": <base64>}
  -> {"data": {"output": str | null, "error": str | null}}

Each call is attempted once. Transport failures and rejected payloads
surface as BadInput.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from onecode.core.config import COMPILER_ROUTES, COMPILER_TIMEOUT_SECONDS, COMPILER_URL
from onecode.core.errors import BadInput
from onecode.core.messages import ERROR_MESSAGES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    output: Optional[str] = None
    error: Optional[str] = None


def create_http_client(base_url: str = COMPILER_URL, timeout: float = COMPILER_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers={"accept": "application/json", "Content-Type": "application/json"},
    )


def route_for_language(language: str, routes: Dict[str, str] = COMPILER_ROUTES) -> str:
    """Sub-route for a language tag; unknown languages map to an empty route"""
    return routes.get(language, "")


class ExecutionClient:
    def __init__(self, http_client: httpx.AsyncClient, routes: Dict[str, str] = COMPILER_ROUTES):
        self._http = http_client
        self._routes = routes

    async def run(self, encoded_code: str, language: str) -> ExecutionResult:
        route = route_for_language(language, self._routes)
        if not route:
            logger.error("[COMPILER] No route for language %s", language)
            raise BadInput(ERROR_MESSAGES["unsupported_language"], hint=language)

        try:
            response = await self._http.post(f"/{route}", json={"code": encoded_code})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error("[COMPILER] Invalid input received for code in lang - %s: %s", language, e)
            raise BadInput(ERROR_MESSAGES["invalid_test_input"], details=str(e))
        except ValueError as e:
            logger.error("[COMPILER] Unreadable response for lang - %s: %s", language, e)
            raise BadInput(ERROR_MESSAGES["invalid_test_input"], details=str(e))

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            logger.error("[COMPILER] Response without data envelope for lang - %s", language)
            raise BadInput(ERROR_MESSAGES["invalid_test_input"], details="missing data")

        logger.info("[COMPILER] Code executed successfully for language - %s", language)

        if data.get("error") is not None:
            return ExecutionResult(error=str(data["error"]))
        return ExecutionResult(output=data.get("output") or None)

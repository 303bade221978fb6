"""
CEP address lookup via BrasilAPI.

Used by the storefront to prefill checkout and address forms. Lookups are
best effort: any failure yields None and the customer types the address.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import InvalidPostalCodeError
from app.modules.shipping.postal_code import BRAZILIAN_STATES, normalize_postal_code

logger = logging.getLogger(__name__)

CEP_PATH = "/api/cep/v1/{cep}"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class CepAddress:
    cep: str
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def state_name(self) -> Optional[str]:
        if not self.state:
            return None
        return BRAZILIAN_STATES.get(self.state.upper())


class CepLookupService:
    """BrasilAPI CEP client."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.BRASILAPI_BASE_URL).rstrip("/")
        self._http_client = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_address(self, cep: Optional[str]) -> Optional[CepAddress]:
        """
        Look up the address for a CEP.

        Returns:
            CepAddress, or None for an invalid or unknown CEP or a failed lookup
        """
        try:
            digits = normalize_postal_code(cep)
        except InvalidPostalCodeError:
            return None

        url = f"{self.base_url}{CEP_PATH.format(cep=digits)}"
        client = self._get_http_client()
        try:
            response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.RequestError as e:
            logger.error(f"Error fetching CEP {digits}: {type(e).__name__}: {e}")
            return None

        if not response.is_success:
            logger.info(f"CEP {digits} not found (status {response.status_code})")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.error(f"BrasilAPI returned non-JSON body for CEP {digits}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Unexpected BrasilAPI response for CEP {digits}: {type(data).__name__}")
            return None

        return CepAddress(
            cep=str(data.get("cep") or digits),
            street=data.get("street"),
            neighborhood=data.get("neighborhood"),
            city=data.get("city"),
            state=data.get("state"),
        )

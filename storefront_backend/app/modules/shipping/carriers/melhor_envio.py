"""
Melhor Envio Carrier Implementation

Quote aggregation across Brazilian carriers (Correios, Jadlog, ...) via
POST /api/v2/me/shipment/calculate.

- Bearer token authentication, identifying User-Agent required by the API
- Single attempt per quote, no retries
- 400/422 mean the destination cannot be routed automatically
"""
import json
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import ShippingConfig
from app.core.exceptions import CarrierApiError, UnserviceableAddressError
from app.modules.shipping.carriers.base import BaseCarrier, CarrierCode, QuoteRequest
from app.modules.shipping.carriers import register_carrier

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/api/v2/me/shipment/calculate"

# Client-side rejections: destination too close to the origin or unroutable
UNSERVICEABLE_STATUS_CODES = frozenset({400, 422})


@register_carrier(CarrierCode.MELHOR_ENVIO)
class MelhorEnvioCarrier(BaseCarrier):
    """Melhor Envio quote client."""

    def __init__(
        self,
        config: Optional[ShippingConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(config)
        self._http_client = http_client

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.MELHOR_ENVIO

    @property
    def carrier_name(self) -> str:
        return "Melhor Envio"

    @property
    def calculate_url(self) -> str:
        return f"{self._config.api_base_url}{CALCULATE_PATH}"

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._config.timeout_seconds)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.carrier_token}",
            "Content-Type": "application/json",
            "User-Agent": self._config.user_agent,
        }

    @staticmethod
    def _error_details(response: httpx.Response) -> Dict[str, Any]:
        """Best-effort decode of an error body for logging."""
        try:
            return {"body": response.json()}
        except ValueError:
            return {"raw": response.text[:500]}

    async def calculate(self, request: QuoteRequest) -> Any:
        """POST the quote payload and return the parsed JSON body."""
        payload = request.to_payload()
        logger.info(f"Calling Melhor Envio API with: {json.dumps(payload)}")

        client = self._get_http_client()
        try:
            response = await client.post(self.calculate_url, headers=self._headers(), json=payload)
        except httpx.RequestError as e:
            logger.error(f"Melhor Envio request failed: {type(e).__name__}: {e}")
            raise CarrierApiError(details={"reason": f"network_error: {type(e).__name__}"})

        if not response.is_success:
            details = self._error_details(response)
            logger.error(f"Melhor Envio API error status: {response.status_code}")
            logger.error(f"Melhor Envio API error: {details}")

            if response.status_code in UNSERVICEABLE_STATUS_CODES:
                raise UnserviceableAddressError(status_code=response.status_code, details=details)
            raise CarrierApiError(status_code=response.status_code, details=details)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Melhor Envio returned non-JSON body: {response.text[:200]!r}")
            raise CarrierApiError(
                status_code=response.status_code,
                details={"reason": "invalid_json"},
            )

        logger.info(
            f"Melhor Envio response type: {type(data).__name__}"
            + (f" ({len(data)} entries)" if isinstance(data, list) else "")
        )
        logger.debug(f"Melhor Envio response: {json.dumps(data, ensure_ascii=False)[:2000]}")
        return data

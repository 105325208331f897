"""
CHAOS API client for line information.

Authenticates with the control credentials and fetches the
current telemetry snapshot of every broadband line.
"""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..config import ExporterSettings, get_exporter_settings
from ..exceptions import ConfigurationError, FetchError
from .schemas import LineInfoResponse, LineRecord

logger = logging.getLogger(__name__)


class LineInfoClient:
    """
    Client for the upstream line-info endpoint.

    Responsibilities:
    - Send the authenticated line-info request
    - Decode the response into LineRecord values
    - Report every failure as a FetchError
    """

    def __init__(
        self,
        settings: Optional[ExporterSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the line-info client.

        Args:
            settings: Exporter settings.
            transport: Optional httpx transport, used by tests.
        """
        self.settings = settings or get_exporter_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        """Initialize HTTP client."""
        if self._client:
            return

        self._client = httpx.AsyncClient(
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=self._transport,
        )
        logger.info(f"Line info client initialized: {self.settings.upstream.url}")

    async def disconnect(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Line info client disconnected")

    def _credentials(self) -> dict:
        upstream = self.settings.upstream
        login = upstream.username.get_secret_value()
        password = upstream.password.get_secret_value()

        if not login.strip() or not password.strip():
            raise ConfigurationError(
                "Upstream credentials are empty, refusing to fetch",
                setting="upstream",
            )

        return {
            "control_login": login,
            "control_password": password,
        }

    async def fetch_lines(self) -> List[LineRecord]:
        """
        Fetch the current line records.

        Returns:
            Decoded line records, possibly empty.

        Raises:
            ConfigurationError: If credentials are empty.
            FetchError: On transport failure, non-2xx status or bad body.
        """
        payload = self._credentials()
        await self.connect()

        try:
            response = await self._client.post(
                self.settings.upstream.url,
                json=payload,
            )
        except httpx.HTTPError as e:
            raise FetchError(
                f"Error requesting line info: {e}",
                reason=FetchError.TRANSPORT,
            ) from e

        if not response.is_success:
            raise FetchError(
                f"Line info request failed: {response.status_code}",
                reason=FetchError.STATUS,
                status_code=response.status_code,
            )

        try:
            decoded = LineInfoResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise FetchError(
                f"Undecodable line info response: {e.error_count()} error(s)",
                reason=FetchError.DECODE,
                status_code=response.status_code,
            ) from e

        logger.debug(f"Fetched {len(decoded.info)} line(s)")
        return decoded.info

"""
HTTP Appointment Lookup Implementation.

Fetches authoritative appointment records from the booking system's
public verification endpoint:

    GET {baseUrl}/api/public/verify-appointment?ref=GV-001

Response bodies:
    {"success": true, "appointment": {...}}         record found
    {"success": true, "data": {...}}                 record found
    {"success": false, "message": "..."}             not found (often HTTP 404)

Follows:
- SRP: Only handles the lookup request/response mapping
- DIP: Implements IAppointmentLookup
"""

import logging
from typing import Any, Dict, Optional

import httpx

from core.interfaces.appointment_lookup_interface import (
    AppointmentLookupError,
    AppointmentRecord,
    IAppointmentLookup,
    LookupResponse
)


class HttpAppointmentLookup(IAppointmentLookup):
    """
    Appointment lookup over HTTP using httpx.AsyncClient.

    Every request is bounded by a timeout; a timeout or transport error
    raises AppointmentLookupError instead of hanging the terminal.
    """

    DEFAULT_VERIFY_PATH = "/api/public/verify-appointment"

    def __init__(
        self,
        baseUrl: str,
        verifyPath: str = DEFAULT_VERIFY_PATH,
        timeoutSeconds: float = 5.0,
        apiToken: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize HttpAppointmentLookup.

        Args:
            baseUrl: Base URL of the booking system (e.g. "https://govlink.lk").
            verifyPath: Path of the verification endpoint.
            timeoutSeconds: Total timeout per lookup request.
            apiToken: Optional bearer token sent with every request.
            client: Pre-built client (tests inject one with a mock transport).
            logger: Logger instance for debug output.
        """
        self._baseUrl = baseUrl.rstrip("/")
        self._verifyPath = "/" + verifyPath.lstrip("/")
        self._timeoutSeconds = timeoutSeconds
        self._logger = logger or logging.getLogger(__name__)

        # Sent per request; an injected client is left untouched
        self._headers = {"Accept": "application/json"}
        if apiToken:
            self._headers["Authorization"] = f"Bearer {apiToken}"

        self._ownsClient = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeoutSeconds))

        self._logger.info(
            f"HttpAppointmentLookup initialized "
            f"(endpoint={self._baseUrl}{self._verifyPath}, timeout={timeoutSeconds}s)"
        )

    @property
    def endpoint(self) -> str:
        """Get the full verification endpoint URL."""
        return f"{self._baseUrl}{self._verifyPath}"

    async def findByReference(self, reference: str) -> LookupResponse:
        """
        Fetch the authoritative record for a booking reference.

        Args:
            reference: Booking reference from the appointment pass.

        Returns:
            LookupResponse: success with record, or non-success with message.

        Raises:
            AppointmentLookupError: On timeout, transport error, or a body
                that is not a usable lookup response.
        """
        try:
            response = await self._client.get(
                self.endpoint,
                params={"ref": reference},
                headers=self._headers,
                timeout=self._timeoutSeconds
            )
        except httpx.TimeoutException as e:
            self._logger.error(f"[{reference}] Lookup timed out after {self._timeoutSeconds}s")
            raise AppointmentLookupError(f"Lookup timed out: {e}") from e
        except httpx.HTTPError as e:
            self._logger.error(f"[{reference}] Lookup transport error: {e}")
            raise AppointmentLookupError(f"Lookup request failed: {e}") from e

        body = self._parseBody(reference, response)

        if not body.get("success"):
            message = str(body.get("message") or "Appointment not found")
            self._logger.info(
                f"[{reference}] Lookup refused (status={response.status_code}): {message}"
            )
            return LookupResponse(success=False, message=message)

        recordData = body.get("data") or body.get("appointment")
        if not isinstance(recordData, dict):
            self._logger.error(f"[{reference}] Lookup succeeded without an appointment record")
            raise AppointmentLookupError("Lookup response has no appointment record")

        record = AppointmentRecord.fromDict(recordData)
        if not record.bookingReference:
            record.bookingReference = reference
        elif record.bookingReference != reference:
            self._logger.warning(
                f"[{reference}] Lookup returned a record for "
                f"'{record.bookingReference}', not the scanned reference"
            )

        self._logger.debug(
            f"[{reference}] Lookup found appointment "
            f"(status={record.status}, dept={record.department})"
        )
        return LookupResponse(
            success=True,
            message=str(body.get("message") or ""),
            data=record
        )

    def _parseBody(self, reference: str, response: httpx.Response) -> Dict[str, Any]:
        """
        Decode the JSON body of a lookup response.

        A 4xx answer with a JSON {"success": false} body is a business
        refusal, not an error. Anything else that is not JSON is.
        """
        try:
            body = response.json()
        except ValueError as e:
            self._logger.error(
                f"[{reference}] Lookup returned non-JSON body "
                f"(status={response.status_code})"
            )
            raise AppointmentLookupError(
                f"Unexpected lookup response (HTTP {response.status_code})"
            ) from e

        if not isinstance(body, dict):
            raise AppointmentLookupError("Lookup response is not a JSON object")

        if response.status_code >= 500 and body.get("success") is not False:
            raise AppointmentLookupError(f"Lookup server error (HTTP {response.status_code})")

        return body

    async def aclose(self) -> None:
        """Close the HTTP client if this lookup created it."""
        if self._ownsClient:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpAppointmentLookup":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

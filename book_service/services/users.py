"""
User Service Client

Remote permission gate. The user service owns tokens and the masks
granted to them; this client asks it for a token's mask and tests it
against what the current operation requires.

Protocol:
    POST {user_service_url}/user/permissions
    {"token": "<token>"}

    200 OK
    {"permissions": "129"}

The mask arrives as a decimal string (an integer is accepted too). Some
user service builds spell the key "permissios"; both are read.

Anything other than a well-formed 200 answer means the permission could
not be determined. That is reported as UpstreamUnavailableError, never
as a denial.
"""

import logging

import httpx

from book_service.errors import UpstreamUnavailableError
from book_service.permissions import PermissionChecker, has_permission

logger = logging.getLogger(__name__)

PERMISSIONS_PATH = "/user/permissions"

# The second key is a misspelling some user service builds still emit.
_PERMISSION_KEYS = ("permissions", "permissios")


class UserServiceClient(PermissionChecker):
    """
    Permission gate that calls the user service over HTTP.

    The underlying httpx.Client is created once and reused across
    requests; it is thread-safe, so one client serves the whole
    request threadpool.

    Args:
        base_url: User service base URL, e.g. "http://users:8081"
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def fetch_permissions(self, token: str) -> int:
        """
        Ask the user service for the mask granted to ``token``.

        Returns:
            The granted bitmask

        Raises:
            UpstreamUnavailableError: If the service cannot be reached or
                its answer cannot be understood
        """
        try:
            response = self._client.post(PERMISSIONS_PATH, json={"token": token})
        except httpx.HTTPError as exc:
            logger.error(f"User service request failed: {exc}")
            raise UpstreamUnavailableError(
                f"error sending request to user service: {exc}"
            ) from exc

        if response.status_code != httpx.codes.OK:
            logger.error(f"User service answered {response.status_code}: {response.text}")
            raise UpstreamUnavailableError(
                f"failed to check permissions, status: {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError(
                f"error decoding permissions response: {exc}"
            ) from exc

        return _parse_mask(payload)

    def check_permissions(self, token: str, required: int) -> bool:
        return has_permission(self.fetch_permissions(token), required)

    def close(self) -> None:
        self._client.close()


def _parse_mask(payload: object) -> int:
    """Extract the unsigned mask from a decoded permissions response."""
    if not isinstance(payload, dict):
        raise UpstreamUnavailableError("error decoding permissions response: not an object")

    raw = next((payload[key] for key in _PERMISSION_KEYS if key in payload), None)
    if raw is None:
        raise UpstreamUnavailableError("error decoding permissions response: no permissions field")

    # bool is an int subclass; "true" is not a mask
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise UpstreamUnavailableError(f"error converting permission value: {raw!r}")

    # Plain ASCII decimal digits only: no sign, whitespace, underscores or
    # non-ASCII digits, all of which int() would otherwise accept
    if isinstance(raw, str) and not (raw.isascii() and raw.isdigit()):
        raise UpstreamUnavailableError(f"error converting permission value: {raw!r}")

    mask = int(raw)
    if mask < 0:
        raise UpstreamUnavailableError(f"error converting permission value: {raw!r}")
    return mask

import logging

import httpx

from wya.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class IdentityProvider:
    """Deletes identities held by the Supabase auth admin API."""

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout
        self.transport = transport

    async def delete_identity(self, identity_id: str) -> bool:
        """Returns False if the provider no longer knows the identity."""
        if not self.base_url or not self.service_role_key:
            raise UpstreamFailure("Identity provider is not configured")

        url = f"{self.base_url}/auth/v1/admin/users/{identity_id}"
        headers = {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.delete(url, headers=headers)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise UpstreamFailure(f"Identity provider unreachable: {e}") from e

        if resp.status_code == 404:
            logger.info(f"Identity {identity_id} already absent from provider")
            return False
        if resp.is_error:
            raise UpstreamFailure(
                f"Identity provider refused to delete {identity_id}: HTTP {resp.status_code}"
            )
        return True

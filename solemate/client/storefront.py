"""
Storefront API client

Thin async client over the HTTP API. It keeps the guest session id and the
access token it is handed, and doubles as a :class:`ShadowSink`.
"""

from typing import Any, Dict, Optional
import httpx
import logging
import uuid

from solemate.core.config import settings
from solemate.services.owner import Owner, AccountOwner, SessionOwner

logger = logging.getLogger(__name__)

class StorefrontClient:
    """Client for the ``/api/v1`` cart, wishlist, session and auth routes"""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        session_id: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.access_token = access_token
        self.session_id = session_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport
        )

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _identity_headers(self, owner: Optional[Owner] = None) -> Dict[str, str]:
        headers = {}

        if isinstance(owner, SessionOwner):
            headers[settings.SESSION_HEADER_NAME] = owner.id
        elif isinstance(owner, AccountOwner):
            if not self.access_token:
                raise ValueError("An access token is required to write to an account")
            headers["Authorization"] = f"Bearer {self.access_token}"
        elif owner is None:
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            elif self.session_id:
                headers[settings.SESSION_HEADER_NAME] = self.session_id
        else:
            raise TypeError(f"Unsupported owner: {owner!r}")

        return headers

    async def _request(
        self,
        method: str,
        path: str,
        owner: Optional[Owner] = None,
        **kwargs
    ) -> Dict[str, Any]:
        response = await self._client.request(
            method,
            path,
            headers=self._identity_headers(owner),
            **kwargs
        )
        response.raise_for_status()

        # Keep whatever session the server settled on
        issued = response.headers.get(settings.SESSION_HEADER_NAME)
        if issued and not self.access_token:
            self.session_id = issued

        return response.json()

    async def create_session(self) -> str:
        data = await self._request("POST", "/session/create")
        self.session_id = data["session_id"]
        return self.session_id

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Sign in; the server adopts this client's guest session"""
        data = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password}
        )
        self.access_token = data["tokens"]["access_token"]

        migration = data.get("migration", {})
        if migration.get("attempted") and not migration.get("succeeded"):
            logger.warning(f"Guest state was not carried over on login: {migration.get('error')}")

        self.session_id = None
        return data

    async def get_cart(self) -> Dict[str, Any]:
        return await self._request("GET", "/cart")

    async def get_wishlist(self) -> Dict[str, Any]:
        return await self._request("GET", "/wishlist")

    async def add_to_cart(self, owner: Owner, variant_id: uuid.UUID, quantity: int) -> None:
        await self._request(
            "POST",
            "/cart",
            owner,
            json={"variant_id": str(variant_id), "quantity": quantity}
        )

    async def add_to_wishlist(
        self,
        owner: Owner,
        product_id: uuid.UUID,
        variant_id: Optional[uuid.UUID] = None
    ) -> None:
        await self._request(
            "POST",
            "/wishlist",
            owner,
            json={
                "product_id": str(product_id),
                "variant_id": str(variant_id) if variant_id else None,
            }
        )

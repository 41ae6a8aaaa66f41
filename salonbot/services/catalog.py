from typing import Any, Dict, List, Optional

import httpx

from salonbot.errors import GatewayUnavailable, NotFoundError
from salonbot.logger import get_logger
from salonbot.models import PaymentMethod

log = get_logger(__name__)


class CatalogGateway:
    """Асинхронный клиент API сайта салона. Один запрос на вызов, без кэша."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.error("API %s %s failed: %s", method, path, exc)
            raise GatewayUnavailable(f"{method} {path}: {exc}") from exc
        if response.status_code == 404:
            raise NotFoundError(f"{method} {path}")
        if response.is_error:
            log.error("API %s %s returned %s: %s", method, path, response.status_code, response.text[:200])
            raise GatewayUnavailable(f"{method} {path}: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            log.error("API %s %s returned non-JSON body", method, path)
            raise GatewayUnavailable(f"{method} {path}: invalid JSON") from exc

    async def list_services(self, category: Optional[str] = None) -> List[Dict]:
        params = {"category": category} if category else None
        return await self._request("GET", "/services", params=params)

    async def get_service(self, service_id: int) -> Dict:
        return await self._request("GET", f"/services/{service_id}")

    async def list_masters(self) -> List[Dict]:
        return await self._request("GET", "/masters")

    async def get_master(self, master_id: int) -> Dict:
        return await self._request("GET", f"/masters/{master_id}")

    async def list_products(self) -> List[Dict]:
        return await self._request("GET", "/products")

    async def get_product(self, product_id: int) -> Dict:
        return await self._request("GET", f"/products/{product_id}")

    async def list_bookings(self, user_id: Optional[int] = None, status: Optional[str] = None) -> List[Dict]:
        params: Dict[str, Any] = {}
        if user_id is not None:
            params["user_id"] = user_id
        if status:
            params["status"] = status
        return await self._request("GET", "/bookings", params=params or None)

    async def create_booking(
        self,
        name: Optional[str],
        phone: Optional[str],
        email: Optional[str],
        service_id: int,
        master_id: Optional[int],
        date_time: str,
        note: Optional[str],
        tg_id: int,
    ) -> bool:
        payload = {
            "name": name,
            "phone": phone,
            "email": email,
            "service_id": service_id,
            "master_id": master_id,
            "date_time": date_time,
            "note": note,
            "tg_id": tg_id,
        }
        data = await self._request("POST", "/bookings", json=payload)
        return bool(isinstance(data, dict) and data.get("success"))

    async def create_order(self, user_id: int, product_id: int, quantity: int, payment_method: PaymentMethod) -> bool:
        payload = {
            "action": "create_order",
            "user_id": user_id,
            "product_id": product_id,
            "quantity": quantity,
            "payment_method": payment_method.value,
        }
        data = await self._request("POST", "/products", json=payload)
        return bool(isinstance(data, dict) and data.get("success"))

    def photo_url(self, photo: str) -> str:
        site = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        return f"{site}/uploads/{photo}"

from typing import Any, Dict, Optional

import httpx

from budget_app.core.settings import settings


class BudgetApiClient:
    """Thin HTTP client for the auth endpoints the frontend calls."""

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(base_url=base_url or settings.api_base_url, transport=transport)

    def sign_in(self, form_data: Dict[str, Any]) -> httpx.Response:
        return self._client.post("/users/login", json=form_data)

    def sign_up(self, form_data: Dict[str, Any]) -> httpx.Response:
        return self._client.post("/users/signup", json=form_data)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BudgetApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

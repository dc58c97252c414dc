import json

import httpx

from budget_app.client import BudgetApiClient


def test_client_posts_forms_to_auth_endpoints():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"ok": True})

    with BudgetApiClient(base_url="http://budget.test", transport=httpx.MockTransport(handler)) as api:
        assert api.sign_in({"email": "a@example.com", "password": "pw"}).status_code == 200
        api.sign_up({"email": "a@example.com", "password": "pw", "name": "A", "user_type": "USER"})

    assert seen[0] == ("POST", "/users/login", {"email": "a@example.com", "password": "pw"})
    assert seen[1][:2] == ("POST", "/users/signup")

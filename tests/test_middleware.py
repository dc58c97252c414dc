import asyncio
import time

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from budget_app.db.session import _connect_args
from budget_app.middleware import RequestTimeoutMiddleware


def make_app(timeout_seconds: float) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=timeout_seconds)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(2)
        return {"done": True}

    @app.get("/slow-sync")
    def slow_sync():
        time.sleep(0.5)
        return {"done": True}

    @app.get("/fast")
    def fast():
        return {"done": True}

    @app.get("/missing")
    def missing():
        raise HTTPException(status_code=404, detail="User not found")

    return app


def test_slow_async_request_gets_a_single_timeout_response():
    client = TestClient(make_app(timeout_seconds=0.05))

    r = client.get("/slow")
    assert r.status_code == 504
    assert r.json() == {"detail": "Request timed out"}


def test_slow_sync_request_in_worker_thread_gets_timeout_response():
    client = TestClient(make_app(timeout_seconds=0.05))

    r = client.get("/slow-sync")
    assert r.status_code == 504
    assert r.json() == {"detail": "Request timed out"}


def test_fast_request_is_untouched():
    client = TestClient(make_app(timeout_seconds=5))

    r = client.get("/fast")
    assert r.status_code == 200
    assert r.json() == {"done": True}


def test_handler_errors_pass_through_before_the_deadline():
    client = TestClient(make_app(timeout_seconds=5))

    r = client.get("/missing")
    assert r.status_code == 404
    assert r.json() == {"detail": "User not found"}


def test_db_calls_are_bounded_by_the_request_budget():
    assert _connect_args("sqlite:///./budget.db", 100.0) == {"check_same_thread": False, "timeout": 100.0}
    assert _connect_args("postgresql://u:p@db/budget", 2.5) == {"options": "-c statement_timeout=2500"}

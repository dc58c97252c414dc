import logging

from fastapi import FastAPI

from budget_app.db.session import init_db


logger = logging.getLogger(__name__)


def register_startup(app: FastAPI) -> None:
    @app.on_event("startup")
    def _create_tables() -> None:
        init_db()
        logger.info("Database tables ready")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from budget_app.core.logging import configure_logging
from budget_app.core.settings import settings
from budget_app.errors import register_exception_handlers
from budget_app.middleware import RequestTimeoutMiddleware
from budget_app.routers.users import router as users_router
from budget_app.startup import register_startup

configure_logging()

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

register_startup(app)
register_exception_handlers(app)

app.include_router(users_router, tags=["users"])


@app.get("/")
def show_home():
    return {"message": "This is home page"}


@app.get("/health")
def health_check():
    return {"status": "ok"}

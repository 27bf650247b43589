import logging

from fastapi import FastAPI

from renewal_engine.api.routes import deadlines_router, lifecycle_router, renewals_router
from renewal_engine.config import get_settings

settings = get_settings()

logging.basicConfig(level=settings.log_level)

app = FastAPI(title=settings.app_name)

app.include_router(deadlines_router)
app.include_router(renewals_router)
app.include_router(lifecycle_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

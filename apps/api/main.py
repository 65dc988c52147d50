from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

try:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
except Exception:  # pragma: no cover - optional dependency resolution
    FastAPIInstrumentor = None

from apps.api.observability import init_observability
from apps.api.reminders_scheduler import start_scheduler
from apps.api.routes.cats import router as cats_router
from apps.api.routes.notifications import router as notifications_router
from apps.api.routes.reminders import router as reminders_router
from packages.core import config
from packages.core.logging_config import configure_logging
from packages.core.notifications.config import load_notification_settings
from packages.core.storage.sqlite import SQLiteCareStore


configure_logging()

init_observability()
app = FastAPI(title="CatCare Scheduler API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
if FastAPIInstrumentor is not None:
    FastAPIInstrumentor.instrument_app(app)
else:
    logging.getLogger("catcare.api").warning(
        "OpenTelemetry instrumentation not available. "
        "Install observability dependencies to enable tracing."
    )
app.include_router(cats_router)
app.include_router(notifications_router)
app.include_router(reminders_router)

app.state.notifier = None


@app.on_event("startup")
def _start_reminder_scheduler() -> None:
    if not config.scheduler_enabled():
        return
    if app.state.notifier is not None:
        return
    store = SQLiteCareStore(db_path=config.db_path())
    settings = load_notification_settings(config.notification_settings_path())
    app.state.notifier = start_scheduler(store, settings)


@app.on_event("shutdown")
def _stop_reminder_scheduler() -> None:
    if app.state.notifier is not None:
        app.state.notifier.shutdown()
        app.state.notifier = None


def run() -> None:
    uvicorn.run(app, host=config.api_host(), port=config.api_port())


if __name__ == "__main__":
    run()

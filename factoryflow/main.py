"""
FactoryFlow Accounting: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from factoryflow.config import get_settings
from factoryflow.api.health import router as health_router
from factoryflow.api.ledger import router as ledger_router
from factoryflow.api.payments import router as payments_router
from factoryflow.api.journal import router as journal_router
from factoryflow.api.accounts import router as accounts_router
from factoryflow.api.verification import router as verification_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry bookkeeping core for small manufacturers",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(payments_router)
app.include_router(journal_router)
app.include_router(accounts_router)
app.include_router(verification_router)

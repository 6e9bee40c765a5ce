"""
Ledger Core: FastAPI application.

This is the entry point for the application.
Logging is configured and all routers are registered here.
"""

from fastapi import FastAPI

from ledger_core.config import get_settings
from ledger_core.logging_config import configure_logging
from ledger_core.errors import MalformedInputError
from ledger_core.api.errors import malformed_input_handler
from ledger_core.api.health import router as health_router
from ledger_core.api.ledger import router as ledger_router
from ledger_core.api.vouchers import router as vouchers_router
from ledger_core.api.transactions import router as transactions_router
from ledger_core.api.open_items import router as open_items_router
from ledger_core.api.reports import router as reports_router

settings = get_settings()
configure_logging(settings)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger, transaction register and financial statements",
    debug=settings.DEBUG,
)

app.add_exception_handler(MalformedInputError, malformed_input_handler)

# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(vouchers_router)
app.include_router(transactions_router)
app.include_router(open_items_router)
app.include_router(reports_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ledger_core.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )

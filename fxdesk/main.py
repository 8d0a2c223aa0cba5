# fxdesk/main.py
"""
FastAPI application for the simulated forex margin desk.

Run with:
    uvicorn fxdesk.main:app --reload --port 3001

Or use run_server.py.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fxdesk.api import account as account_router
from fxdesk.api import analysis as analysis_router
from fxdesk.api import health as health_router
from fxdesk.api import positions as positions_router
from fxdesk.api import rates as rates_router
from fxdesk.api import trades as trades_router
from fxdesk.deps import get_ledger, get_rate_provider, get_settings
from fxdesk.services.errors import TradingError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    rates = get_rate_provider()
    ledger = get_ledger()
    logger.info(
        "Forex desk starting: %d instruments, balance %s",
        len(rates.instruments),
        ledger.balance,
    )

    yield

    logger.info(
        "Forex desk shutting down: %d open positions, balance %s",
        ledger.open_position_count(),
        ledger.balance,
    )


app = FastAPI(title="Forex Desk API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TradingError)
async def trading_error_handler(request: Request, exc: TradingError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={
            "detail": f"{field}: {message}" if field else message,
            "code": "invalid_request",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred", "code": "internal_error"},
    )


app.include_router(rates_router.router)
app.include_router(analysis_router.router)
app.include_router(trades_router.router)
app.include_router(positions_router.router)
app.include_router(account_router.router)
app.include_router(health_router.router)

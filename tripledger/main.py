import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from tripledger.api.v1.routes.system import router as system_router
from tripledger.api.v1.routes.expense import router as expense_router
from tripledger.api.v1.routes.balances import router as balances_router
from tripledger.core.config import settings
from tripledger.core.exceptions import LedgerError
from tripledger.core.logging_config import configure_logging
from tripledger.db.session import Base, engine
import tripledger.models.expense  # register models on Base
import tripledger.models.expense_split

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.get("/")
async def root():
    return {"message": "Trip Ledger is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(expense_router, prefix="/api/v1/trips/{trip_id}/expenses")
app.include_router(balances_router, prefix="/api/v1/trips/{trip_id}")

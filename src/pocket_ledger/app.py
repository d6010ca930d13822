from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pocket_ledger.api.routes import dashboard, planning, transactions
from pocket_ledger.core import settings
from pocket_ledger.logger import get_logger, setup_logging
from pocket_ledger.services.ledger import LedgerService
from pocket_ledger.storage.store import TransactionStore

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing ledger...")
        settings.log_environment()

        ledger_path = settings.get_ledger_path()
        store = TransactionStore(data_path=ledger_path)
        app.state.ledger = LedgerService(store=store)

        logger.info("Ledger ready at %s.", ledger_path)
        yield
        app.state.ledger = None
        logger.info("Ledger closed.")

    app = FastAPI(title="Pocket Ledger", lifespan=lifespan)

    app.include_router(dashboard.router)
    app.include_router(transactions.router)
    app.include_router(planning.router)

    return app


app = create_app()

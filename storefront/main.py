import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from config import settings
from storefront.api.routes import router
from storefront.database.postgres_store import postgres_store
from storefront.services.wallet import HttpWalletProvider
from storefront.state.store import SessionCarts

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),  # This outputs to console/terminal
    ]
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting up storefront...")
    await postgres_store.init_pool()
    app.state.order_store = postgres_store
    app.state.carts = SessionCarts()
    if settings.WALLET_RPC_URL:
        app.state.wallet = HttpWalletProvider(settings.WALLET_RPC_URL)
    else:
        logger.warning("WALLET_RPC_URL not set, checkout is disabled")
        app.state.wallet = None
    yield
    # Shutdown
    logger.info("Shutting down storefront...")
    await postgres_store.close()

app = FastAPI(title=settings.STORE_NAME, lifespan=lifespan)
app.include_router(router)

@app.get("/")
def read_root():
    return {
        "message": f"Welcome to {settings.STORE_NAME}",
        "database": "PostgreSQL"
    }

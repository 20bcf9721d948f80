from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.database import engine
from app.core.exceptions import register_exception_handlers
from app.core.init_db import create_tables
from app.modules.auth.routes import router as auth_router, account_router
from app.modules.tenders.routes import router as tenders_router
from app.modules.bids.routes import router as bids_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    create_tables()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    engine.dispose()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="Tendering marketplace API",
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app, debug=settings.DEBUG)

# Registration and login live at the root, everything else under the API prefix
api_prefix = settings.API_PREFIX
app.include_router(auth_router, tags=["Authentication"])
app.include_router(account_router, prefix=f"{api_prefix}/auth", tags=["Authentication"])
app.include_router(tenders_router, prefix=api_prefix, tags=["Tenders"])
app.include_router(bids_router, prefix=api_prefix, tags=["Bids"])


@app.get("/")
async def root():
    return {
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "message": "Welcome to the API"
    }

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8888, reload=True)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moneymap import __version__
from moneymap.config import settings
from moneymap.api.routes import health, simulations


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: apply configured log level
    logging.getLogger("moneymap").setLevel(settings.LOG_LEVEL.upper())
    yield


app = FastAPI(title="Money Map Projections", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(simulations.router, prefix="/api")

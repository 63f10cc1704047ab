"""FastAPI application entrypoint. No business logic; only wiring, logging and middleware."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from userservice.api import gateway
from userservice.api.errors import register_exception_handlers
from userservice.api.v1 import router as v1_router
from userservice.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

app = FastAPI(
    title="User service",
    description="User registration, authentication and bearer token lifecycle.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(gateway.router, prefix=gateway.ORDER_PREFIX, tags=["gateway"])

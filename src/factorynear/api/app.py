# src/factorynear/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and runs the one-shot startup work
(dataset load + location resolution) in the lifespan hook.
Business logic lives in `factorynear.session.controller` and below.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from factorynear.core.logging import configure_logging

from . import routes

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # The controller loads the dataset on construction; the location request happens once here.
    await routes._controller().start()
    yield


app = FastAPI(title="FactoryNear API", version="0.1.0", lifespan=lifespan)

# CORS (dev-friendly): allow local frontends (e.g. http://localhost:5173) to call this API.
# Configure via env:
# - FACTORYNEAR_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
# - FACTORYNEAR_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("FACTORYNEAR_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("FACTORYNEAR_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(routes.router)

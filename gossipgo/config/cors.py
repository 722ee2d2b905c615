"""CORS configuration for browser front-ends."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gossipgo.config.settings import Settings


def configure_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

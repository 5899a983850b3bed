from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from battle_report.options import ParserOptions
from battle_report.web.api import router as api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield


def create_app(options: ParserOptions | None = None) -> FastAPI:
    app = FastAPI(title="Battle Report Parser", lifespan=lifespan)
    app.state.parser_options = options or ParserOptions()

    app.include_router(api_router.router)

    return app


app = create_app()

import uvicorn

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shotify.utils.logging import setup_logging
from shotify.infra.api_routes import analysis_route, seasons_route, stats_route
from shotify.infra.db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    yield


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Shotify", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(stats_route.router, prefix="/stats")
    app.include_router(seasons_route.router, prefix="/seasons")
    app.include_router(analysis_route.router, prefix="/analysis")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "shotify.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True
    )

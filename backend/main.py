from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from src.agent import SessionRegistry
from src.db import MemoryStore
from src.llm import LLMClient
from src.logger import get_logger
from src.routes import router
import config

logger = get_logger(__name__)


def create_app(store: MemoryStore | None = None, client: LLMClient | None = None) -> FastAPI:
    """Build the API with its own store, model client and session registry"""
    app = FastAPI(title="CodeStudio API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store if store is not None else MemoryStore()
    app.state.llm = client if client is not None else LLMClient()
    app.state.sessions = SessionRegistry(app.state.store, app.state.llm)

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting CodeStudio API on {config.HOST}:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)

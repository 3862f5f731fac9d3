import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from auth import build_identity_strategy
from config import settings
from database import init_db
from logging_config import configure_logging
from maintenance import start_maintenance, stop_maintenance
from realtime import ConnectionRegistry
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.posts import router as posts_router
from routes.comments import router as comments_router
from routes.chat import router as chat_router
from routes.dm import router as dm_router
from routes.admin import router as admin_router
from routes.files import router as files_router
from routes.ws import router as ws_router

logger = logging.getLogger(__name__)

def create_app(identity_strategy=None, registry=None) -> FastAPI:
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting with %s identity strategy", app.state.identity.name)
        tasks = start_maintenance(settings) if settings.enable_scheduler else []
        try:
            yield
        finally:
            await stop_maintenance(tasks)

    app = FastAPI(title="The Brotherhood API", lifespan=lifespan)

    # Selected once; never switched per request
    app.state.identity = identity_strategy or build_identity_strategy(settings)
    if registry is None:
        registry = ConnectionRegistry(settings.ws_send_timeout_seconds, settings.ws_outbox_size)
    app.state.registry = registry

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize database
    init_db()

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(chat_router)
    app.include_router(dm_router)
    app.include_router(admin_router)
    app.include_router(files_router)
    app.include_router(ws_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=5000, reload=True)

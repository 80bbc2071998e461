from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .routers import horde


def create_app(lifecycle=None) -> FastAPI:
    """Builds the admin API around a running HordeLifecycle."""
    app = FastAPI(
        title="Horde Admin API",
        description="Operator surface for the night horde spawner",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.lifecycle = lifecycle

    # Health check
    @app.get("/")
    async def root():
        return {
            "status": "online" if lifecycle is not None and lifecycle.started else "idle",
            "service": "Horde Admin API",
            "version": "1.0.0"
        }

    app.include_router(horde.router)
    return app

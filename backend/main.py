# backend/main.py

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import Settings
from routers import league_router, load_router
from services.migrations import apply_migrations
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    settings: Optional[Settings] = None,
    warehouse: Optional[Warehouse] = None,
    sleeper: Optional[SleeperClient] = None,
) -> FastAPI:
    """
    Build the API. The warehouse connection and Sleeper client are created
    once at startup and closed at shutdown; pre-built ones passed in (tests)
    are used as-is and left open.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_warehouse = warehouse is None
        owns_sleeper = sleeper is None

        app.state.warehouse = warehouse or Warehouse.connect(
            settings.warehouse_path, settings.warehouse_dataset
        )
        apply_migrations(app.state.warehouse)

        app.state.sleeper = sleeper or SleeperClient(
            settings.league_id,
            base_url=settings.sleeper_base_url,
            timeout=settings.http_timeout,
        )

        print(f"🚀 League dashboard API ready for league {settings.league_id}")
        yield

        if owns_sleeper:
            await app.state.sleeper.aclose()
        if owns_warehouse:
            app.state.warehouse.close()

    # ---------------------------------------------------------
    # APP INIT
    # ---------------------------------------------------------

    app = FastAPI(title="Sleeper League Dashboard API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    print("🚀 Allowed CORS origins:", settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # ---------------------------------------------------------
    # ROUTERS
    # ---------------------------------------------------------

    app.include_router(league_router)
    app.include_router(load_router)

    @app.get("/health")
    def health():
        return {"status": "OK", "message": "Server is running"}

    # ---------------------------------------------------------
    # DASHBOARD
    # ---------------------------------------------------------

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/")
    def dashboard():
        index_path = STATIC_DIR / "index.html"
        if index_path.exists():
            return FileResponse(index_path)
        raise HTTPException(status_code=404, detail="Dashboard not found")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=3000)

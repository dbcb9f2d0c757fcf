# app/main.py
from dotenv import load_dotenv

load_dotenv()

import logging
import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.appconfig import Settings, settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

# Import routers
from app.system_services.system_routes import router as clinic_router
from app.users.auth_routers import router as auth_router

from app.clinical_store.exceptions import ClinicError
from app.clinical_store.seed import seed_demo_data
from app.clinical_store.store import ClinicalStore
from app.database.connection import create_db_engine
from app.users.auth_services import IdentityProvider

logger = logging.getLogger(__name__)


def build_services(app_settings: Settings):
    """Create the process-wide store and identity provider."""
    engine = create_db_engine(app_settings.DATABASE_URL, echo=app_settings.SQL_ECHO)
    store = ClinicalStore(engine)
    identity = IdentityProvider(
        engine,
        store,
        secret_key=app_settings.SECRET_KEY,
        algorithm=app_settings.ALGORITHM,
        access_token_expiry=app_settings.ACCESS_TOKEN_EXPIRY,
    )

    snapshot_path = app_settings.resolved_snapshot_path
    if snapshot_path is not None and snapshot_path.exists():
        store.load_snapshot_file(snapshot_path)
    elif app_settings.SEED_DEMO_DATA:
        seed_demo_data(store)

    if app_settings.SEED_DEMO_DATA:
        identity.seed_demo_accounts()

    return store, identity


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        store, identity = build_services(app_settings)
        app.state.store = store
        app.state.identity = identity

        print("\n===============================================================================")
        print(f" 🚀 Starting {app_settings.APP_NAME}")
        print(f" ✅ Database: {app_settings.DATABASE_URL}")
        print(f" ✅ Snapshot: {app_settings.resolved_snapshot_path or 'disabled'}")
        print(f" ✅ Records: {store.counts()}")
        print("===============================================================================\n")
        yield
        # Shutdown
        snapshot_path = app_settings.resolved_snapshot_path
        if snapshot_path is not None:
            store.save_snapshot(snapshot_path)
        store.engine.dispose()
        print("👋 Shutting down")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Role-based clinic front desk: appointments, patients and prescriptions",
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
    )

    @app.exception_handler(ClinicError)
    async def clinic_error_handler(request: Request, exc: ClinicError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/health", tags=["System"])
    def health(request: Request):
        return {"status": "ok", "records": request.app.state.store.counts()}

    # Include routers with prefixes
    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(clinic_router, prefix="/api/clinic", tags=["Clinic"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)

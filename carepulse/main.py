from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from carepulse.api import admin, appointments, doctors, patients, storage
from carepulse.core.config import get_settings
from carepulse.core.logger import logger
from carepulse.db.client import init_db

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(settings=None, lifespan_handler=lifespan) -> FastAPI:
    # Fails fast with ConfigurationError when required variables are missing
    settings = settings or get_settings()

    app = FastAPI(title="CarePulse", version="1.0.0", lifespan=lifespan_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(doctors.router)
    app.include_router(appointments.router)
    app.include_router(patients.router)
    app.include_router(admin.router)
    app.include_router(storage.router)

    @app.get("/")
    async def root():
        return {"message": "CarePulse API"}

    logger.info("CarePulse API configured")
    return app

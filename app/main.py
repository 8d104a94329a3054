from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routes import admin, auth, questions, results, topics
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.core.security import check_secret_key
from app.db.init_db import init_db

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_secret_key()
    # Schema is ready before the first request is accepted
    await init_db()
    yield

def create_app() -> FastAPI:
    app = FastAPI(title="QuizGrad API", lifespan=lifespan)

    # CORS middleware configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"ok": True}

    # Include routers
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(topics.router, prefix="/api", tags=["topics"])
    app.include_router(questions.router, prefix="/api", tags=["questions"])
    app.include_router(results.router, prefix="/api", tags=["results"])
    app.include_router(admin.router, prefix="/api", tags=["admin"])
    return app

app = create_app()

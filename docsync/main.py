from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docsync.api.http.health import router as health_router
from docsync.api.http.documents import router as documents_router
from docsync.core.db import init_models
from docsync.core.logging_setup import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_models()
    yield


app = FastAPI(
    title="DocSync",
    description="Хранилище документов для клиента редактирования",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В продакшене указать конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocSync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mahasiswa.core.config import settings
from mahasiswa.core.database import init_db
from mahasiswa.core.handlers import register_exception_handlers
from mahasiswa.core.logging import logger
from mahasiswa.api.v1.router import api_router
from mahasiswa.ui import routes as ui_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.PROJECT_NAME} v{settings.APP_VERSION} started")
    yield
    registry = getattr(app.state, "pages", None)
    if registry is not None:
        await registry.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# REST collection (the page's remote data gateway talks to this)
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

# The single HTML page
app.include_router(ui_routes.router, tags=["page"])


@app.get("/health")
def health():
    """
    Health check endpoint
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "docs": "/docs",
        "version": settings.APP_VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mahasiswa.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)

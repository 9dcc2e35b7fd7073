from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from html_i18n.core.config import Settings
from html_i18n.core.i18n import I18n
from html_i18n.core.logging_config import setup_logging
from html_i18n.core.middleware import I18nMiddleware

settings = Settings()
setup_logging(settings)

i18n = I18n(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load translation catalogs on startup."""
    # Refuse to start with a broken configuration
    i18n.provision()
    yield


# Create FastAPI app
app = FastAPI(
    title="html-i18n demo",
    description="Static site translated on the fly from .po catalogs",
    version="1.0.0",
    lifespan=lifespan,
)

# Translation middleware - rewrites every HTML response
app.add_middleware(I18nMiddleware, i18n=i18n)


@app.get("/health", summary="Health check")
async def health() -> dict[str, object]:
    """Report which catalogs are loaded."""
    return {
        "status": "ok" if i18n.provisioned else "starting",
        "source_language": settings.SOURCE_LANGUAGE,
        "languages": i18n.languages,
    }


# Mount the static site last so /health is not shadowed
app.mount("/", StaticFiles(directory=settings.SITE_DIR, html=True), name="site")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wineqr.api.routes import labels, ui
from wineqr.core.config import settings
from wineqr.core.errors import register_exception_handlers
from wineqr.core.log import configure_logging
from wineqr.core.middleware import RequestContextMiddleware

configure_logging()

app = FastAPI(
    title="Wine QR Label Generator",
    version="0.1.0",
    description=(
        "Generates scannable QR labels and information pages for wine lots. "
        "Nutrition values are printed as supplied by the cellar."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(labels.router, prefix="/api/v1/labels", tags=["labels"])
app.include_router(ui.router, tags=["ui"])

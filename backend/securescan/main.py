from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from securescan.api.reports import router as reports_router
from securescan.core.config import configure_logging, get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="SecureScan API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(reports_router)

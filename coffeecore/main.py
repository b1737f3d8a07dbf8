from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from coffeecore.api.routes import router
from coffeecore.settings import settings
from coffeecore.observability.logging import log

app = FastAPI(title="Coffee Core Interest Capture API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Coffee Core interest capture is running. POST /api/sessions to start a page session."
    }


@app.get("/health")
def health():
    return {"status": "ok"}


# Visitors only ever see a confirmation or a manual-contact invitation;
# anything else surfaces as a generic error body.
@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    log(event="unhandled_exception", path=str(request.url.path),
        errorType=type(exc).__name__, error=str(exc)[:300])
    return JSONResponse(
        status_code=500,
        content={"status": "error", "detail": "Something went wrong. Write to us directly from the contact section."},
    )


print(f"[boot] NOTIFY_URL={settings.NOTIFY_URL} NOTIFY_TIMEOUT_SEC={settings.NOTIFY_TIMEOUT_SEC} ADMIN_EMAIL={settings.ADMIN_EMAIL}")

"""
ChatBRO Service
Handles: chat dispatch to OpenAI / Anthropic / Google / Cohere, API key updates
Port: $PORT (default 3000)

- One endpoint for every provider; the provider is picked per request
- Keys live in an app-owned CredentialStore, injected per request
- Every failure comes back as {"error": "..."} with a 400 or 500
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatbro import __version__
from chatbro.config import HOST, LOG_LEVEL, PORT, SERVICE_NAME
from chatbro.credentials import CredentialStore
from chatbro.dependencies import get_credential_store
from chatbro.dispatcher import dispatch
from chatbro.exceptions import DispatchError
from chatbro.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    KeyStatusResponse,
    KeysUpdate,
    RootResponse,
    UpdateKeysResponse,
)
from chatbro.providers import PROVIDER_IDS

logging.basicConfig(level=LOG_LEVEL, format=f"[{SERVICE_NAME}] %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    configured = app.state.credentials.configured_providers()
    logger.info("Started on port %s", PORT)
    logger.info("Providers with keys: %s", ", ".join(configured) or "none")
    yield


app = FastAPI(
    title="ChatBRO",
    description="Proxies chat messages to OpenAI, Anthropic, Google or Cohere.",
    version=__version__,
    lifespan=lifespan,
)

# TestClient without a `with` block skips lifespan, so the store is made here
app.state.credentials = CredentialStore.from_env()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error handlers ────────────────────────────────────────────────────────────

@app.exception_handler(DispatchError)
async def dispatch_error(request: Request, exc: DispatchError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=400, content={"error": detail})


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.get("/", response_model=RootResponse)
async def root():
    return {
        "app": "ChatBRO",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "providers": list(PROVIDER_IDS),
    }


@app.post("/api/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(body: ChatRequest, credentials: CredentialStore = Depends(get_credential_store)):
    logger.info("Chat request for model: %s", body.model)
    try:
        response = await dispatch(body.message, body.model, credentials)
    except DispatchError as e:
        logger.info("Chat request rejected (%s): %s", e.kind.value, e.message)
        raise
    return {"response": response}


@app.post("/api/update-keys", response_model=UpdateKeysResponse, responses=ERROR_RESPONSES)
async def update_keys(body: KeysUpdate, credentials: CredentialStore = Depends(get_credential_store)):
    changed = credentials.set_credentials(body.model_dump(exclude_none=True))
    logger.info("Updated API keys for: %s", ", ".join(changed) or "nothing")
    return {"success": True, "message": "API keys updated successfully"}


@app.get("/api/key-status", response_model=KeyStatusResponse)
async def key_status(credentials: CredentialStore = Depends(get_credential_store)):
    """Which providers have a key. Presence only, the keys never leave the server."""
    return credentials.get_status()


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": SERVICE_NAME}


def run():
    import uvicorn
    uvicorn.run("chatbro.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()

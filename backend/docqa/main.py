from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docqa.core.config import Settings, get_settings, settings
from docqa.core.log import configure_logging
from docqa.services.chat import handle_chat
from docqa.services.completion import CompletionGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Completion model: %s (credential %s)", settings.openai_model,
                "set" if settings.openai_api_key else "missing")
    yield


app = FastAPI(title="DocQA Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# Every method is routed to the handler so it can answer 405 itself.
CHAT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_gateway(s: Settings = Depends(get_settings)) -> CompletionGateway:
    return CompletionGateway.from_settings(s)


@app.get("/health")
def health():
    return {"ok": True, "service": "docqa-backend"}


@app.api_route("/chat", methods=CHAT_METHODS)
@app.api_route("/.netlify/functions/chat", methods=CHAT_METHODS, include_in_schema=False)
async def chat(request: Request, gateway: CompletionGateway = Depends(get_gateway)):
    body = await request.body()
    # Extraction and the SDK call both block.
    outcome = await run_in_threadpool(handle_chat, request.method, body, gateway)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)

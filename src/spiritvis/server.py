"""
Chat proxy: a FastAPI app that forwards conversations to the upstream
chat completions API and returns only the reply text.

The proxy keeps no state. Each request reads the credential afresh, makes
one upstream call and maps the outcome to a small JSON body.
"""

import json
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from spiritvis.config import TEMPERATURE, UPSTREAM_URL, ProxySettings

logger = logging.getLogger(__name__)


def _extract_reply(data):
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    return message.get("content") or ""


def create_app(static_dir=None, transport=None):
    """
    Build the proxy app.

    `static_dir` is served at the root when given. `transport` is handed to
    the httpx client, which lets tests stand in for the upstream API.
    """
    app = FastAPI(title="spiritvis chat proxy")

    @app.post("/api/chat")
    async def chat(request: Request):
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse({"error": "Invalid JSON"}, status_code=400)

        try:
            settings = ProxySettings.from_env()
        except ValueError:
            logger.exception("[!] Invalid proxy configuration")
            return JSONResponse({"error": "Invalid configuration"}, status_code=500)

        if not settings.api_key:
            return JSONResponse({"error": "Missing OPENAI_API_KEY"}, status_code=500)

        messages = payload.get("messages") if isinstance(payload, dict) else None
        body = {
            "model": settings.model,
            "messages": messages or [],
            "temperature": TEMPERATURE,
        }

        try:
            async with httpx.AsyncClient(transport=transport, timeout=None) as client:
                upstream = await client.post(
                    UPSTREAM_URL,
                    json=body,
                    headers={"Authorization": f"Bearer {settings.api_key}"},
                )
            if not upstream.is_success:
                logger.warning(f"[!] Upstream returned {upstream.status_code}")
                return JSONResponse({"error": upstream.text}, status_code=upstream.status_code)
            reply = _extract_reply(upstream.json())
        except Exception:
            logger.exception("[!] Upstream error")
            return JSONResponse({"error": "Upstream error"}, status_code=500)

        logger.debug(f"[i] Reply of {len(reply)} chars from {settings.model}")
        return {"reply": reply}

    if static_dir is not None:
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app

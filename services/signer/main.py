"""
Quantum Signer: HTTP signing service
====================================
Generate a keypair, sign a message, verify a signature.

Endpoints:
  POST /generate-key     new keypair for the configured scheme → {publicKey, scheme}
                         (GET is accepted too, for browser clients that fetch it directly)
  POST /sign             {message} → {signature, publicKey, scheme}
  POST /verify           {message, signature, publicKey, scheme?} → {valid, scheme}
  GET  /schemes          registered signature schemes and their sizes
  GET  /health           liveness

All keys and signatures travel as lowercase hex.  The private key is held in
process memory only and never returned.  Errors are answered as
  { "error": "<ErrorName>", "detail": "<message>" }
with 400 for client mistakes, 413 for oversized messages and 503 when the
entropy source fails.

Run:
  python services/signer/main.py
  uvicorn main:app --app-dir services/signer

Configuration: see settings.py.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from keyslot import KeySlot
from settings import Settings, load_settings
from sigcrypto.codec import decode_public_key, decode_signature, encode_hex
from sigcrypto.engine import SignatureEngine, available_schemes, get_engine
from sigcrypto.errors import InvalidInput, MessageTooLarge, SigningError
from sigcrypto.schemes import RandomSource

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
log = logging.getLogger("quantum-signer")

SERVICE_NAME    = "quantum-signer"
SERVICE_VERSION = "1.0.0"


# ── Request models ────────────────────────────────────────────────────────────

class SignRequest(BaseModel):
    message: str


class VerifyRequest(BaseModel):
    message:    str
    signature:  str
    public_key: str = Field(alias="publicKey")
    scheme:     str | None = None
    model_config = {"populate_by_name": True}


# ── Dependencies ──────────────────────────────────────────────────────────────

def get_key_slot(request: Request) -> KeySlot:
    return request.app.state.key_slot


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _message_bytes(message: str, settings: Settings) -> bytes:
    try:
        raw = message.encode("utf-8")
    except UnicodeEncodeError:
        # JSON can carry lone surrogates (e.g. "\ud800"), which have no UTF-8 form
        raise InvalidInput("message is not valid Unicode text") from None
    if len(raw) > settings.max_message_bytes:
        raise MessageTooLarge(settings.max_message_bytes, len(raw))
    return raw


def _engine_for(scheme: str | None, slot: KeySlot) -> SignatureEngine:
    if scheme is None or scheme == slot.engine.scheme_name:
        return slot.engine
    return get_engine(scheme)


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(
    settings: Settings | None = None,
    random_source: RandomSource | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    logging.getLogger().setLevel(settings.log_level)

    engine = get_engine(settings.scheme)

    app = FastAPI(title="Quantum Signer", version=SERVICE_VERSION)
    app.state.settings = settings
    app.state.key_slot = KeySlot(engine, random_source)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Origin", "Content-Type"],
        expose_headers=["Content-Length"],
        allow_credentials=True,
    )

    # ── Error mapping ─────────────────────────────────────────────────────────

    @app.exception_handler(SigningError)
    async def signing_error(request: Request, exc: SigningError) -> JSONResponse:
        log.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def invalid_input(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        return JSONResponse(status_code=400, content=InvalidInput(problems).to_dict())

    # ── Routes ────────────────────────────────────────────────────────────────

    @app.api_route("/generate-key", methods=["GET", "POST"])
    def generate_key(slot: KeySlot = Depends(get_key_slot)) -> dict[str, Any]:
        keypair = slot.generate()
        return {"publicKey": keypair.public_key_hex, "scheme": keypair.scheme}

    @app.post("/sign")
    def sign(
        body: SignRequest,
        slot: KeySlot = Depends(get_key_slot),
        cfg: Settings = Depends(get_settings),
    ) -> dict[str, Any]:
        result = slot.sign(_message_bytes(body.message, cfg))
        return {
            "signature": encode_hex(result.signature),
            "publicKey": encode_hex(result.public_key),
            "scheme":    result.scheme,
        }

    @app.post("/verify")
    def verify(
        body: VerifyRequest,
        slot: KeySlot = Depends(get_key_slot),
        cfg: Settings = Depends(get_settings),
    ) -> dict[str, Any]:
        engine     = _engine_for(body.scheme, slot)
        message    = _message_bytes(body.message, cfg)
        signature  = decode_signature(body.signature, engine.descriptor)
        public_key = decode_public_key(body.public_key, engine.descriptor)
        valid = slot.verify(public_key, message, signature, engine)
        return {"valid": valid, "scheme": engine.scheme_name}

    @app.get("/schemes")
    def schemes(slot: KeySlot = Depends(get_key_slot)) -> dict[str, Any]:
        return {
            "active":  slot.engine.scheme_name,
            "schemes": [d.to_dict() for d in available_schemes()],
        }

    # ── Health ────────────────────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": SERVICE_NAME}

    @app.get("/")
    def root(slot: KeySlot = Depends(get_key_slot)) -> dict[str, Any]:
        return {
            "service": "Quantum Signer",
            "scheme":  slot.engine.scheme_name,
            "state":   slot.state.value,
            "docs":    "/docs",
        }

    log.info(
        "%s %s ready (scheme=%s, cors=%s)",
        SERVICE_NAME, SERVICE_VERSION, engine.scheme_name, ",".join(settings.cors_origins),
    )
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

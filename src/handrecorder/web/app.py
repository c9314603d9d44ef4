from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from ..features.session import HandRecord, RecorderSessionManager, StoredHandPayload, create_session_routers
from ..features.session.concurrency import shutdown_executor
from ..storage import HandStore, StoredHand, store_from_env

logger = logging.getLogger(__name__)


def _stored_payload(hand: StoredHand) -> StoredHandPayload:
    return StoredHandPayload(id=hand.id, created_at=hand.created_at, input=HandRecord.model_validate(hand.input))


def _hands_router(store: HandStore) -> APIRouter:
    router = APIRouter(prefix="/api/v1/hands", tags=["hands"])

    @router.get("")
    def list_hands() -> JSONResponse:
        hands = [_stored_payload(hand).to_dict() for hand in store.list_hands()]
        return JSONResponse({"hands": hands})

    @router.get("/{hand_id}")
    def get_hand(hand_id: str) -> JSONResponse:
        hand = store.get_hand(hand_id)
        if hand is None:
            raise HTTPException(404, f"hand '{hand_id}' not found")
        return JSONResponse(_stored_payload(hand).to_dict())

    return router


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_executor()


def create_app(store: HandStore | None = None) -> FastAPI:
    app = FastAPI(title="Hand Recorder", lifespan=_lifespan)
    manager = RecorderSessionManager(store if store is not None else store_from_env())
    app.state.manager = manager

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    router_v1, router_legacy = create_session_routers(manager)
    app.include_router(router_v1)
    app.include_router(router_legacy)
    app.include_router(_hands_router(manager.store))

    def _custom_openapi() -> dict[str, object]:  # pragma: no cover - exercised via docs
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version="1.0.0",
            description="Record poker hands street by street.",
            routes=app.routes,
        )
        app.openapi_schema = schema
        return schema

    app.openapi = _custom_openapi  # type: ignore[assignment]
    return app


app = create_app()


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    logger.info("Serving hand recorder on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()

"""Operational endpoints.

- /health: liveness, always 200 while the process serves requests
- /healthz: readiness, checks the database and the event bus
- /metrics: Prometheus exposition
"""

import json
from typing import Any

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from blog_graphql.app.context import ContextFactory
from blog_graphql.app.db.database import Database
from blog_graphql.app.pubsub import PubSub

router = APIRouter()


async def check_db(db: Database) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        ok = await db.ping()
        return (ok, "ok" if ok else "error: unexpected result")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_pubsub(pubsub: PubSub) -> tuple[bool, str]:
    """Check event bus connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        ok = await pubsub.ping()
        return (ok, "ok" if ok else "error: ping failed")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(request: Request) -> dict[str, Any] | Response:
    """Readiness check.

    Returns:
        200 with component status if all components are ok
        503 if any component fails
    """
    context: ContextFactory = request.app.state.context

    db_ok, db_status = await check_db(context.db)
    pubsub_ok, pubsub_status = await check_pubsub(context.pubsub)

    response_body = {
        "status": "ok" if db_ok and pubsub_ok else "degraded",
        "components": {
            "db": db_status,
            "pubsub": pubsub_status,
        },
    }

    if not (db_ok and pubsub_ok):
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

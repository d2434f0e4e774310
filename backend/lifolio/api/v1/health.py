"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from lifolio.api.deps import json_response, timing
from lifolio.core.extensions import get_token_service
from lifolio.infra.redis.redis_revocation_store import RedisRevocationStore

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and revocation store health information."""

    store = get_token_service().store
    if isinstance(store, RedisRevocationStore):
        store_status = "ok" if store.ping() else "fail"
    else:
        store_status = "in_memory"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {
        "status": "ok" if store_status != "fail" else "degraded",
        "revocation_store": store_status,
        "version": version,
    }
    return json_response(payload, status=200 if store_status != "fail" else 503)

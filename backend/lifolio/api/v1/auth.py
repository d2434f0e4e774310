"""Authentication endpoints backed by the token service."""

from __future__ import annotations

from flask import Blueprint, g

from lifolio.api.deps import current_principal, json_response, require_auth, timing
from lifolio.core.extensions import get_token_service
from lifolio.schemas import WhoAmISchema

bp = Blueprint("auth", __name__)

whoami_schema = WhoAmISchema()


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the presented access token and drop the refresh marker."""

    principal = current_principal()
    get_token_service().logout(principal.user_id, g.access_token)
    return "", 204


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the authenticated principal and the token expiry."""

    principal = current_principal()
    expires_at = get_token_service().expires_at(g.access_token)
    body = {
        "data": whoami_schema.dump(
            {
                "user_id": principal.user_id,
                "username": principal.username,
                "authorities": list(principal.authorities),
                "expires_at": expires_at,
            }
        )
    }
    return json_response(body)

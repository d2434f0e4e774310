"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    user_id = fields.Integer(required=True)
    username = fields.String(required=True)
    authorities = fields.List(fields.String(), required=True)
    expires_at = fields.AwareDateTime(required=True)

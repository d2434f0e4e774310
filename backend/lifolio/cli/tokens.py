"""Flask CLI commands for issuing and inspecting tokens during development."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from lifolio.core.extensions import get_token_service
from lifolio.schemas import TokenPairSchema
from lifolio.services.auth.dto import Accepted

LOGGER = logging.getLogger(__name__)


def _ensure_non_production() -> None:
    """Abort token minting when running in production."""
    config = current_app.config
    if config.get("DEBUG") or config.get("TESTING"):
        return
    raise click.UsageError("'flask tokens issue' is restricted to non-production environments.")


@click.group("tokens")
def tokens_cli() -> None:
    """Token utilities (issue / inspect)."""


@tokens_cli.command("issue")
@click.argument("user_id", type=int)
@with_appcontext
def issue(user_id: int) -> None:
    """Issue an access/refresh pair for USER_ID and record the refresh marker."""
    _ensure_non_production()
    pair = get_token_service().issue_token_pair(user_id)
    LOGGER.info("token.issued_via_cli", extra={"user_id": user_id})
    for name, value in TokenPairSchema().dump(pair).items():
        click.echo(f"{name}={value}")


@tokens_cli.command("inspect")
@click.argument("token")
@with_appcontext
def inspect(token: str) -> None:
    """Validate an access TOKEN and print the outcome."""
    result = get_token_service().validate(token)
    if isinstance(result, Accepted):
        click.echo(f"accepted user_id={result.user_id}")
        return
    click.echo(f"rejected reason={result.reason.value} user_id={result.user_id}")
    raise SystemExit(1)

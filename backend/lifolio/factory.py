"""Application factory wiring extensions, blueprints and the token service."""

from __future__ import annotations

from flask import Flask

from lifolio.core.config import BaseConfig, get_config
from lifolio.core.logger import configure_logging, init_app as init_logging
from lifolio.services._shared.ports import PrincipalResolver, RevocationStore


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    revocation_store: RevocationStore | None = None,
    principal_resolver: PrincipalResolver | None = None,
) -> Flask:
    """Build and configure the Flask application.

    ``revocation_store`` and ``principal_resolver`` let callers (tests, or a
    host application owning the user table) inject their own collaborators.
    """

    app = Flask(__name__)

    app.config.from_object(get_config() if config is None else config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from lifolio.core import extensions

    extensions.init_app(app, store=revocation_store, principal_resolver=principal_resolver)

    init_logging(app)

    from lifolio.api import init_app as init_api

    init_api(app)

    from lifolio.core import errors

    errors.init_app(app)

    from lifolio import cli as app_cli

    app_cli.init_app(app)

    return app

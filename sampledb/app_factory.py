"""Flask app factory for SampleDB."""

from __future__ import annotations

import logging

from flask import Flask

from .config import build_config
from .engine import SampleEngine
from .models import DataSource
from .provisioner import ResourceProvisioner
from .routes import build_blueprint

logger = logging.getLogger(__name__)


def create_app(provisioner: ResourceProvisioner | None = None) -> Flask:
    """Create the Flask app and acquire the sample database for its lifetime."""

    cfg = build_config()
    logging.getLogger("sampledb").setLevel(cfg.log_level)

    engine = SampleEngine()
    if provisioner is None:
        provisioner = ResourceProvisioner(cfg, shutdown_hook=engine.shutdown)
    elif provisioner.shutdown_hook is None:
        provisioner.shutdown_hook = engine.shutdown

    descriptor = provisioner.acquire()
    logger.debug(f"SampleDB available for app at {descriptor}")

    app = Flask(__name__)
    app.extensions["sampledb"] = {
        "provisioner": provisioner,
        "engine": engine,
        "datasource": DataSource.from_descriptor(descriptor),
        "released": False,
    }
    app.register_blueprint(build_blueprint())
    return app


def shutdown_app(app: Flask) -> None:
    """Release the app's reference on the sample database once."""

    ext = app.extensions["sampledb"]
    if ext["released"]:
        return
    ext["released"] = True
    ext["provisioner"].release()

from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import ensure_kv_table
from .database.connection import DBConfig, DatabaseConnection
from .history.controller import register as register_history
from .leave.controller import register as register_leave
from .notes.controller import register as register_notes
from .reports.controller import register as register_reports
from .session.controller import register as register_session

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    api_base_url = getattr(settings, "API_BASE_URL")
    db_config = getattr(settings, "DB_CONFIG")
    logger.info("settings=%s api=%s", settings_module, api_base_url)

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            ensure_kv_table(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)))
        container = build_container(
            api_base_url=api_base_url,
            api_timeout=float(getattr(settings, "API_TIMEOUT", 15.0)),
            db_config=db_config,
        )
    app.extensions["instantlog"] = container

    register_session(app, container)
    register_history(app, container)
    register_reports(app, container)
    register_notes(app, container)
    register_leave(app, container)

    return app

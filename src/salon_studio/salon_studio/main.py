from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .appointments.controller import register as register_appointments
from .catalog.controller import register as register_catalog
from .clients.controller import register as register_clients
from .common.validators import money_to_display
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import ensure_demo_admin, ensure_demo_catalog
from .finance.controller import register as register_finance
from .professionals.controller import register as register_professionals
from .scheduling.controller import register as register_scheduling
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger().setLevel(level)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        firestore_config = getattr(settings, "FIRESTORE_CONFIG")
        logger.info("settings=%s project=%s", settings_module, firestore_config.get("project_id"))

        container = build_container(
            firestore_config=firestore_config,
            debit_policy=getattr(settings, "PACKAGE_DEBIT_POLICY", "first_debit_only"),
            admin_email=getattr(settings, "ADMIN_EMAIL", ""),
            whatsapp_number=getattr(settings, "WHATSAPP_NUMBER", ""),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_admin(container.admins_repo, email=container.admin_email)
            ensure_demo_catalog(container.services_repo, container.packages_repo)
            logger.info("Demo seed ready")

    app.extensions["salon_container"] = container
    app.jinja_env.filters["money"] = money_to_display

    @app.context_processor
    def inject_salon_settings():
        return {"salon": container.settings_service.get()}

    register_users(app, container)
    register_dashboard(app, container)
    register_scheduling(app, container)
    register_appointments(app, container)
    register_clients(app, container)
    register_catalog(app, container)
    register_professionals(app, container)
    register_finance(app, container)
    register_settings(app, container)

    return app

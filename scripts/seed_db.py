from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.salon_studio.salon_studio.container import build_container
from src.salon_studio.salon_studio.database.bootstrap import ensure_demo_admin, ensure_demo_catalog

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        firestore_config=dict(settings.FIRESTORE_CONFIG),
        admin_email=settings.ADMIN_EMAIL,
        whatsapp_number=settings.WHATSAPP_NUMBER,
    )

    ensure_demo_admin(container.admins_repo, email=container.admin_email)
    ensure_demo_catalog(container.services_repo, container.packages_repo)
    # Loading settings writes any missing defaults back to the document.
    container.settings_service.refresh()

    logger.info("OK: seeded Firestore project %s", settings.FIRESTORE_CONFIG.get("project_id"))


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from decimal import Decimal

from werkzeug.security import generate_password_hash

from ..catalog.model import PackageServiceItem
from ..catalog.repository import PackageRepository, ServiceRepository
from ..core.enums import CatalogStatus
from ..users.repository import AdminRepository

logger = logging.getLogger(__name__)

DEMO_ADMIN_ID = "demo-admin"
DEMO_ADMIN_PASSWORD = "admin123"


def ensure_demo_admin(admins: AdminRepository, *, email: str, password: str = DEMO_ADMIN_PASSWORD) -> None:
    """Create (or reset) the demo staff account."""

    admins.upsert(
        user_id=DEMO_ADMIN_ID,
        email=email,
        full_name="Admin NailStudio",
        password_hash=generate_password_hash(password),
    )
    logger.info("Demo admin ready: %s", email)


def ensure_demo_catalog(services: ServiceRepository, packages: PackageRepository) -> None:
    """Seed the starter catalog when the salon has no services yet."""

    if services.list_all():
        logger.info("Catalog already populated, skipping seed")
        return

    manicure = services.create(name="Manicure Simples", price=Decimal("35.00"), duration="45min", category="Mãos")
    pedicure = services.create(name="Pedicure Completa", price=Decimal("45.00"), duration="60min", category="Pés")
    services.create(name="Spa dos Pés", price=Decimal("60.00"), duration="75min", category="Pés")

    if not packages.list_all():
        packages.create(
            name="Pacote Essencial",
            short_description="4 manicures e 2 pedicures com desconto.",
            services=[
                PackageServiceItem(service_id=manicure, quantity=4),
                PackageServiceItem(service_id=pedicure, quantity=2),
            ],
            price=Decimal("167.00"),
            original_price=Decimal("220.00"),
            validity_days=90,
            status=CatalogStatus.ACTIVE,
            theme_color="accent",
        )
        packages.create(
            name="Pacote Pedicure Premium",
            short_description="4 pedicures completas.",
            services=[PackageServiceItem(service_id=pedicure, quantity=4)],
            price=Decimal("130.00"),
            original_price=Decimal("160.00"),
            validity_days=60,
            status=CatalogStatus.ACTIVE,
            theme_color="primary",
        )
    logger.info("Seeded demo catalog")

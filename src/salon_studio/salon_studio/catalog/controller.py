from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import admin_required
from ..container import Container
from ..core.enums import CatalogStatus
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def _package_form() -> dict:
    quantities = {
        key[len("qty_"):]: value for key, value in request.form.items() if key.startswith("qty_")
    }
    return dict(
        name=request.form.get("name", ""),
        quantities=quantities,
        price=request.form.get("price", ""),
        validity_days=request.form.get("validityDays", ""),
        status=request.form.get("status", CatalogStatus.ACTIVE.value),
        short_description=request.form.get("shortDescription", ""),
        original_price=request.form.get("originalPrice", ""),
        theme_color=request.form.get("themeColor", "primary"),
    )


def register(app: Flask, container: Container) -> None:
    def _run(action, success: str):
        try:
            action()
            flash(success, "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Catalog change failed")
            flash("Erro de sistema ao salvar catálogo", "danger")
        return redirect(url_for("catalog"))

    @app.route("/catalog", endpoint="catalog")
    @admin_required
    def catalog():
        return render_template(
            "catalog.html",
            services=container.catalog_service.list_services(),
            services_by_id=container.catalog_service.services_by_id(),
            packages=container.catalog_service.list_packages(),
            statuses=list(CatalogStatus),
            active_page="catalog",
        )

    @app.route("/catalog/services", methods=["POST"], endpoint="create_service")
    @admin_required
    def create_service():
        return _run(
            lambda: container.catalog_service.create_service(
                name=request.form.get("name", ""),
                price=request.form.get("price", ""),
                duration=request.form.get("duration", ""),
                category=request.form.get("category", ""),
            ),
            "Serviço cadastrado.",
        )

    @app.route("/catalog/services/<service_id>/edit", methods=["POST"], endpoint="edit_service")
    @admin_required
    def edit_service(service_id: str):
        return _run(
            lambda: container.catalog_service.update_service(
                service_id,
                name=request.form.get("name", ""),
                price=request.form.get("price", ""),
                duration=request.form.get("duration", ""),
                category=request.form.get("category", ""),
            ),
            "Serviço atualizado.",
        )

    @app.route("/catalog/services/<service_id>/delete", methods=["POST"], endpoint="delete_service")
    @admin_required
    def delete_service(service_id: str):
        return _run(lambda: container.catalog_service.delete_service(service_id), "Serviço removido.")

    @app.route("/catalog/packages", methods=["POST"], endpoint="create_package")
    @admin_required
    def create_package():
        return _run(lambda: container.catalog_service.create_package(**_package_form()), "Pacote cadastrado.")

    @app.route("/catalog/packages/<package_id>/edit", methods=["POST"], endpoint="edit_package")
    @admin_required
    def edit_package(package_id: str):
        return _run(
            lambda: container.catalog_service.update_package(package_id, **_package_form()),
            "Pacote atualizado.",
        )

    @app.route("/catalog/packages/<package_id>/status", methods=["POST"], endpoint="toggle_package")
    @admin_required
    def toggle_package(package_id: str):
        def action():
            pkg = container.catalog_service.get_package(package_id)
            new_status = CatalogStatus.INACTIVE if pkg.status == CatalogStatus.ACTIVE else CatalogStatus.ACTIVE
            container.catalog_service.set_package_status(package_id, new_status)

        return _run(action, "Status do pacote alterado.")

    @app.route("/catalog/packages/<package_id>/delete", methods=["POST"], endpoint="delete_package")
    @admin_required
    def delete_package(package_id: str):
        return _run(lambda: container.catalog_service.delete_package(package_id), "Pacote removido.")

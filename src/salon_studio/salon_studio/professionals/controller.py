from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/professionals", methods=["GET", "POST"], endpoint="professionals")
    @admin_required
    def professionals():
        if request.method == "POST":
            try:
                container.professional_service.create_professional(
                    name=request.form.get("name", ""),
                    specialty=request.form.get("specialty", ""),
                    commission_rate=request.form.get("commissionRate"),
                )
                flash("Profissional cadastrado.", "success")
                return redirect(url_for("professionals"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating professional failed")
                flash("Erro de sistema ao cadastrar profissional", "danger")

        return render_template(
            "professionals.html",
            professionals=container.professional_service.list_professionals(),
            active_page="professionals",
        )

    @app.route("/professionals/<professional_id>/edit", methods=["POST"], endpoint="edit_professional")
    @admin_required
    def edit_professional(professional_id: str):
        try:
            container.professional_service.update_professional(
                professional_id,
                name=request.form.get("name", ""),
                specialty=request.form.get("specialty", ""),
                commission_rate=request.form.get("commissionRate"),
            )
            flash("Profissional atualizado.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Updating professional failed")
            flash("Erro de sistema ao atualizar profissional", "danger")
        return redirect(url_for("professionals"))

    @app.route("/professionals/<professional_id>/delete", methods=["POST"], endpoint="delete_professional")
    @admin_required
    def delete_professional(professional_id: str):
        try:
            container.professional_service.delete_professional(professional_id)
            flash("Profissional removido.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting professional failed")
            flash("Erro de sistema ao remover profissional", "danger")
        return redirect(url_for("professionals"))

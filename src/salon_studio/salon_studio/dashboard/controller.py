from __future__ import annotations

import logging

from flask import Flask, flash, render_template

from ..common.datetime_utils import today_local
from ..common.web import admin_required
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @admin_required
    def dashboard():
        today = today_local()
        metrics = None
        appointments = []
        try:
            metrics = container.dashboard_service.metrics(today=today)
            appointments = container.appointment_service.list_range(start=today, end=today)
        except Exception:
            logger.exception("Dashboard data failed to load")
            flash("Não foi possível carregar os dados do dashboard.", "danger")
        return render_template(
            "dashboard.html",
            metrics=metrics,
            appointments=appointments,
            today=today,
            active_page="dashboard",
        )

from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_time_of_day
from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import DomainError
from .model import DayOpeningHours

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "user_name",
    "salon_tagline",
    "salon_logo_url",
    "whatsapp_scheduling_message",
    "salon_name",
    "salon_address",
    "salon_phone",
    "client_login_title",
    "client_login_description",
    "theme",
)


def _hours_from_form(current: tuple[DayOpeningHours, ...]) -> list[DayOpeningHours]:
    out: list[DayOpeningHours] = []
    for h in current:
        dow = h.day_of_week
        out.append(
            DayOpeningHours(
                day_of_week=dow,
                name=h.name,
                is_open=request.form.get(f"isOpen_{dow}") == "on",
                open_time=parse_time_of_day(request.form.get(f"openTime_{dow}", "")),
                close_time=parse_time_of_day(request.form.get(f"closeTime_{dow}", "")),
            )
        )
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/settings", methods=["GET", "POST"], endpoint="settings")
    @admin_required
    def settings():
        if request.method == "POST":
            try:
                current = container.settings_service.get()
                changes = {f: request.form.get(f, "").strip() for f in TEXT_FIELDS if f in request.form}
                changes["opening_hours"] = _hours_from_form(current.opening_hours)
                container.settings_service.update(**changes)
                flash("Configurações salvas.", "success")
                return redirect(url_for("settings"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Saving settings failed")
                flash("Erro de sistema ao salvar configurações", "danger")

        return render_template(
            "settings.html",
            app_settings=container.settings_service.get(),
            active_page="settings",
        )

    @app.route("/settings/refresh", methods=["POST"], endpoint="refresh_settings")
    @admin_required
    def refresh_settings():
        container.settings_service.refresh()
        flash("Configurações recarregadas.", "info")
        return redirect(url_for("settings"))

from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, render_template, request

from ..common.datetime_utils import format_iso_date, format_time_of_day, now_local
from ..common.web import admin_required, form_date
from ..container import Container
from ..core.enums import ViewMode
from ..core.exceptions import DomainError
from .slots import ALL_PROFESSIONALS, Agenda, build_agenda, days_in_view, shift_period

logger = logging.getLogger(__name__)


def _view_mode() -> ViewMode:
    try:
        return ViewMode(request.args.get("view") or ViewMode.WEEKLY.value)
    except ValueError:
        return ViewMode.WEEKLY


def _agenda_to_json(agenda: Agenda) -> dict:
    return {
        "view": agenda.view_mode.value,
        "anchor": format_iso_date(agenda.anchor),
        "slots": [format_time_of_day(s) for s in agenda.slots],
        "days": [
            {
                "date": format_iso_date(d.day),
                "isOpen": bool(d.hours and d.hours.is_open),
                "cells": [{"time": format_time_of_day(c.slot), "state": c.state.value} for c in d.cells],
                "appointments": [
                    {
                        "id": p.appointment.appointment_id,
                        "clientName": p.appointment.client_name,
                        "professionalId": p.appointment.professional_id,
                        "status": p.appointment.status.value,
                        "row": p.row,
                        "span": p.span,
                    }
                    for p in d.placements
                ],
            }
            for d in agenda.days
        ],
    }


def register(app: Flask, container: Container) -> None:
    def _load_agenda() -> Agenda:
        now = now_local()
        view = _view_mode()
        anchor = form_date("date") or now.date()
        professional_id = request.args.get("professional") or ALL_PROFESSIONALS

        days = days_in_view(view, anchor)
        appointments = container.appointment_service.list_range(start=days[0], end=days[-1])
        return build_agenda(
            view_mode=view,
            anchor=anchor,
            opening_hours=container.settings_service.get().opening_hours,
            appointments=appointments,
            now=now,
            professional_id=professional_id,
        )

    @app.route("/agenda", endpoint="agenda")
    @admin_required
    def agenda():
        selected = request.args.get("professional") or ALL_PROFESSIONALS
        try:
            data = _load_agenda()
        except DomainError as e:
            flash(str(e), "danger")
            data = build_agenda(
                view_mode=_view_mode(),
                anchor=now_local().date(),
                opening_hours=container.settings_service.get().opening_hours,
                appointments=[],
                now=now_local(),
            )

        return render_template(
            "agenda.html",
            agenda=data,
            prev_date=shift_period(data.view_mode, data.anchor, -1),
            next_date=shift_period(data.view_mode, data.anchor, 1),
            professionals=container.professional_service.list_professionals(),
            services=container.catalog_service.services_by_id(),
            selected_professional=selected,
            view_modes=list(ViewMode),
            active_page="agenda",
        )

    @app.route("/api/agenda", endpoint="api_agenda")
    @admin_required
    def api_agenda():
        try:
            return jsonify({"success": True, "agenda": _agenda_to_json(_load_agenda())})
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Agenda API failed")
            return jsonify({"success": False, "message": "Erro de sistema"}), 500

from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import format_iso_date, format_time_of_day, now_local, today_local
from ..common.validators import money_to_display
from ..common.web import admin_required, flash_outcomes, form_date
from ..container import Container
from ..core.enums import AppointmentStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from .completion import CompletionResult

logger = logging.getLogger(__name__)


def _result_to_json(result: CompletionResult) -> dict:
    return {
        "success": result.ok,
        "debited": result.debited,
        "stampAwarded": result.stamp_awarded,
        "transactionId": result.transaction.transaction_id if result.transaction else None,
        "outcomes": [{"level": o.level.value, "title": o.title, "message": o.message} for o in result.outcomes],
    }


def register(app: Flask, container: Container) -> None:
    def _render_form(*, appointment=None, values=None):
        return render_template(
            "appointment_form.html",
            appointment=appointment,
            values=values or {},
            services=container.catalog_service.list_services(),
            professionals=container.professional_service.list_professionals(),
            clients=container.client_service.list_clients(),
            statuses=list(AppointmentStatus),
            active_page="agenda",
        )

    def _echo_form() -> dict:
        values = request.form.to_dict()
        values["serviceIds"] = request.form.getlist("serviceIds")
        return values

    def _form_values() -> dict:
        return {
            "client_name": request.form.get("clientName", ""),
            "service_ids": request.form.getlist("serviceIds"),
            "professional_id": request.form.get("professionalId", ""),
            "appt_date": form_date("date", required=True),
            "start_time": request.form.get("startTime", ""),
            "end_time": request.form.get("endTime", ""),
            "total_amount": request.form.get("totalAmount") or None,
        }

    @app.route("/appointments/new", methods=["GET", "POST"], endpoint="new_appointment")
    @admin_required
    def new_appointment():
        if request.method == "POST":
            try:
                values = _form_values()
                container.appointment_service.create_appointment(now=now_local(), **values)
                flash(f"Agendamento para {values['client_name'].strip()} criado.", "success")
                return redirect(url_for("agenda", date=format_iso_date(values["appt_date"])))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Saving appointment failed")
                flash("Não foi possível salvar o agendamento.", "danger")
            return _render_form(values=_echo_form())

        return _render_form(
            values={
                "date": request.args.get("date", ""),
                "startTime": request.args.get("time", ""),
                "professionalId": request.args.get("professional", ""),
            }
        )

    @app.route("/appointments/<appointment_id>/edit", methods=["GET", "POST"], endpoint="edit_appointment")
    @admin_required
    def edit_appointment(appointment_id: str):
        try:
            appointment = container.appointment_service.get_appointment(appointment_id)
        except NotFoundError as e:
            flash(str(e), "danger")
            return redirect(url_for("agenda"))

        if request.method == "POST":
            try:
                values = _form_values()
                status_s = request.form.get("status") or appointment.status.value
                try:
                    status = AppointmentStatus(status_s)
                except ValueError:
                    raise ValidationError("Status inválido.")
                result = container.appointment_service.update_appointment(
                    appointment_id, status=status, today=today_local(), **values
                )
                if result is not None:
                    flash_outcomes(result.outcomes)
                else:
                    flash(f"Agendamento de {values['client_name'].strip()} atualizado.", "success")
                return redirect(url_for("agenda", date=format_iso_date(values["appt_date"])))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating appointment failed")
                flash("Não foi possível salvar o agendamento.", "danger")
            return _render_form(appointment=appointment, values=_echo_form())

        return _render_form(
            appointment=appointment,
            values={
                "clientName": appointment.client_name,
                "serviceIds": list(appointment.service_ids),
                "professionalId": appointment.professional_id,
                "date": format_iso_date(appointment.date),
                "startTime": format_time_of_day(appointment.start_time),
                "endTime": format_time_of_day(appointment.end_time),
                "status": appointment.status.value,
                "totalAmount": money_to_display(appointment.amount),
            },
        )

    @app.route("/appointments/<appointment_id>/delete", methods=["POST"], endpoint="delete_appointment")
    @admin_required
    def delete_appointment(appointment_id: str):
        try:
            container.appointment_service.delete_appointment(appointment_id)
            flash("O agendamento foi removido.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting appointment failed")
            flash("Não foi possível remover o agendamento.", "danger")
        return redirect(request.referrer or url_for("agenda"))

    @app.route("/appointments/<appointment_id>/status", methods=["POST"], endpoint="appointment_status")
    @admin_required
    def appointment_status(appointment_id: str):
        payload = request.get_json(silent=True) or request.form
        wants_json = request.is_json

        try:
            try:
                status = AppointmentStatus(payload.get("status", ""))
            except ValueError:
                raise ValidationError("Status inválido.")
            result = container.appointment_service.update_status(appointment_id, status, today=today_local())
        except DomainError as e:
            if wants_json:
                return jsonify({"success": False, "message": str(e)}), 400
            flash(f"Erro ao Atualizar Status: {e}", "danger")
            return redirect(request.referrer or url_for("agenda"))
        except Exception:
            logger.exception("Status change failed for %s", appointment_id)
            if wants_json:
                return jsonify({"success": False, "message": "Erro de sistema"}), 500
            flash("Não foi possível atualizar o status do agendamento.", "danger")
            return redirect(request.referrer or url_for("agenda"))

        if wants_json:
            return jsonify(_result_to_json(result)), (200 if result.ok else 502)
        flash_outcomes(result.outcomes)
        return redirect(request.referrer or url_for("agenda"))

    @app.route("/api/appointments/advisories", methods=["POST"], endpoint="api_package_advisories")
    @admin_required
    def api_package_advisories():
        data = request.get_json(silent=True) or {}
        try:
            advisories = container.appointment_service.package_advisories(
                client_name=str(data.get("clientName") or ""),
                service_ids=[str(s) for s in (data.get("serviceIds") or [])],
                today=today_local(),
            )
            total = container.appointment_service.compute_total([str(s) for s in (data.get("serviceIds") or [])])
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        return jsonify(
            {
                "success": True,
                "totalAmount": money_to_display(total),
                "advisories": [
                    {"serviceId": a.service_id, "serviceName": a.service_name, "message": a.message}
                    for a in advisories
                ],
            }
        )

from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import format_iso_date, today_local
from ..common.web import admin_required, form_date
from ..container import Container
from ..core.constants import EXPENSE_CATEGORIES
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/cash-flow", endpoint="cash_flow")
    @admin_required
    def cash_flow():
        summary = None
        try:
            summary = container.cash_flow_service.monthly_summary(today=today_local(), day=form_date("day"))
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Cash flow failed to load")
            flash("Não foi possível carregar o fluxo de caixa.", "danger")

        return render_template(
            "cash_flow.html",
            summary=summary,
            categories=EXPENSE_CATEGORIES,
            today=today_local(),
            active_page="cash_flow",
        )

    @app.route("/cash-flow/expenses", methods=["POST"], endpoint="add_expense")
    @admin_required
    def add_expense():
        try:
            container.cash_flow_service.record_expense(
                description=request.form.get("description", ""),
                amount=request.form.get("amount", ""),
                tx_date=form_date("date", required=True),
                category=request.form.get("category", ""),
            )
            flash("Despesa registrada.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Recording expense failed")
            flash("Erro de sistema ao registrar despesa", "danger")
        return redirect(url_for("cash_flow"))

    @app.route("/cash-flow/export", endpoint="export_cash_flow")
    @admin_required
    def export_cash_flow():
        today = today_local()
        try:
            summary = container.cash_flow_service.monthly_summary(today=today, day=form_date("day"))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("cash_flow"))

        filename = f"fluxo_caixa_{format_iso_date(summary.month_start)}.csv"
        return app.response_class(
            container.cash_flow_service.to_csv(summary.transactions),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/cash-flow/clear", methods=["POST"], endpoint="clear_cash_flow")
    @admin_required
    def clear_cash_flow():
        try:
            removed = container.cash_flow_service.clear_all()
            flash(f"{removed} transações removidas.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Clearing transactions failed")
            flash("Erro de sistema ao limpar transações", "danger")
        return redirect(url_for("cash_flow"))

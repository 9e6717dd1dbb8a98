"""Flask helpers shared by the controllers (access guards, form parsing, outcomes)."""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import flash, redirect, render_template, request, session, url_for

from ..core.enums import Role
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return redirect(url_for("login"))

        if session.get("role") != Role.ADMIN.value:
            current_user = {"full_name": session.get("name"), "role": session.get("role")}
            return render_template("403.html", current_user=current_user), 403

        return view(*args, **kwargs)

    return wrapper


def client_required(view):
    """Client portal pages; staff sessions do not grant access here."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "client_id" not in session:
            flash("Faça login na área do cliente.", "warning")
            return redirect(url_for("client_login"))
        return view(*args, **kwargs)

    return wrapper


def form_date(name: str, *, required: bool = False) -> Optional[date]:
    raw = (request.values.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationError("Data é obrigatória.")
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError("Data inválida (use AAAA-MM-DD).")


def flash_outcomes(outcomes) -> None:
    for o in outcomes:
        flash(f"{o.title}: {o.message}", o.level.value)

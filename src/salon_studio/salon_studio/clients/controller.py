from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import today_local
from ..common.web import admin_required, client_required
from ..container import Container
from ..core.exceptions import AuthenticationError, DomainError
from .service import loyalty_card_for

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    # -- salon staff ----------------------------------------------------

    @app.route("/clients", methods=["GET", "POST"], endpoint="clients")
    @admin_required
    def clients():
        if request.method == "POST":
            try:
                container.client_service.create_client(
                    name=request.form.get("name", ""),
                    email=request.form.get("email", ""),
                    phone=request.form.get("phone", ""),
                )
                flash(f"{request.form.get('name', '').strip()} foi cadastrado com sucesso.", "success")
                return redirect(url_for("clients"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating client failed")
                flash("Não foi possível cadastrar o novo cliente.", "danger")

        rows = container.client_service.list_clients()
        return render_template(
            "clients.html",
            clients=[(c, loyalty_card_for(c)) for c in rows],
            packages=container.catalog_service.list_active_packages(),
            active_page="clients",
        )

    @app.route("/clients/<client_id>/edit", methods=["POST"], endpoint="edit_client")
    @admin_required
    def edit_client(client_id: str):
        try:
            container.client_service.update_client(
                client_id,
                name=request.form.get("name", ""),
                email=request.form.get("email", ""),
                phone=request.form.get("phone", ""),
            )
            flash("Cliente atualizado.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Updating client failed")
            flash("Erro de sistema ao atualizar cliente", "danger")
        return redirect(url_for("clients"))

    @app.route("/clients/<client_id>/delete", methods=["POST"], endpoint="delete_client")
    @admin_required
    def delete_client(client_id: str):
        try:
            container.client_service.delete_client(client_id)
            flash("Cliente removido.", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting client failed")
            flash("Erro de sistema ao remover cliente", "danger")
        return redirect(url_for("clients"))

    @app.route("/clients/<client_id>/packages", methods=["POST"], endpoint="sell_package")
    @admin_required
    def sell_package(client_id: str):
        try:
            package = container.catalog_service.get_package(request.form.get("packageId", ""))
            instance = container.client_service.purchase_package(client_id, package, purchase_date=today_local())
            flash(f'Pacote "{instance.package_name}" registrado. Válido até {instance.expiry_date:%d/%m/%Y}.', "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Selling package failed")
            flash("Erro de sistema ao registrar pacote", "danger")
        return redirect(url_for("clients"))

    @app.route("/clients/<client_id>/redeem", methods=["POST"], endpoint="redeem_mimo")
    @admin_required
    def redeem_mimo(client_id: str):
        try:
            card = container.client_service.redeem_mimo(client_id)
            flash(f"Mimo resgatado! Disponíveis: {card.mimos_available}.", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("Redeeming mimo failed")
            flash("Erro de sistema ao resgatar mimo", "danger")
        return redirect(url_for("clients"))

    # -- client portal --------------------------------------------------

    def _portal_page(template: str, **ctx):
        return render_template(template, app_settings=container.settings_service.get(), **ctx)

    @app.route("/client/login", methods=["GET", "POST"], endpoint="client_login")
    def client_login():
        if "client_id" in session:
            return redirect(url_for("client_dashboard"))

        if request.method == "POST":
            try:
                client = container.client_portal_service.authenticate(
                    request.form.get("email", ""), request.form.get("password", "")
                )
                session["client_id"] = client.client_id
                session["client_name"] = client.name
                return redirect(url_for("client_dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Client login failed")
                flash("Falha no login. Verifique suas credenciais.", "danger")

        return _portal_page("client/login.html")

    @app.route("/client/register", methods=["GET", "POST"], endpoint="client_register")
    def client_register():
        if request.method == "POST":
            try:
                container.client_portal_service.register(
                    request.form.get("email", ""), request.form.get("password", "")
                )
                flash("Acesso criado! Faça login para continuar.", "success")
                return redirect(url_for("client_login"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Client registration failed")
                flash("Erro de sistema ao criar acesso", "danger")

        return _portal_page("client/register.html")

    @app.route("/client/logout", endpoint="client_logout")
    def client_logout():
        session.pop("client_id", None)
        session.pop("client_name", None)
        return redirect(url_for("client_login"))

    @app.route("/client/dashboard", endpoint="client_dashboard")
    @client_required
    def client_dashboard():
        try:
            client = container.client_service.get_client(session["client_id"])
        except DomainError:
            session.pop("client_id", None)
            return redirect(url_for("client_login"))

        return _portal_page(
            "client/dashboard.html",
            client=client,
            card=loyalty_card_for(client),
            services=container.catalog_service.services_by_id(),
            whatsapp_link=container.settings_service.whatsapp_link(container.whatsapp_number),
            today=today_local(),
        )

    @app.route("/client/redeem", methods=["POST"], endpoint="client_redeem_mimo")
    @client_required
    def client_redeem_mimo():
        try:
            container.client_service.redeem_mimo(session["client_id"])
            flash("Mimo resgatado! Apresente esta tela no salão.", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("Client mimo redemption failed")
            flash("Erro de sistema ao resgatar mimo", "danger")
        return redirect(url_for("client_dashboard"))

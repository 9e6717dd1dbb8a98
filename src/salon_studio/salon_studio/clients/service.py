from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..catalog.model import SalonPackage
from ..common.validators import optional_email, optional_phone, require_min_length, require_non_empty
from ..core.constants import (
    HEARTS_PER_MIMO,
    MIN_CLIENT_NAME_LENGTH,
    MIN_PHONE_DIGITS,
    STAMPS_PER_HEART,
    TOTAL_STAMPS_ON_CARD,
)
from ..core.enums import CatalogStatus
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Client, ClientPackageInstance, LoyaltyCard, PackageServiceBalance
from .repository import ClientRepository

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def find_client_by_name(clients: Sequence[Client], name: str) -> Optional[Client]:
    """Exact match after trimming and lowercasing, as typed on the appointment form."""
    wanted = normalize_name(name)
    if not wanted:
        return None
    for c in clients:
        if normalize_name(c.name) == wanted:
            return c
    return None


def loyalty_card_for(client: Client) -> LoyaltyCard:
    stamps = max(0, client.stamps_earned)
    hearts = stamps // STAMPS_PER_HEART
    earned = hearts // HEARTS_PER_MIMO
    redeemed = max(0, client.mimos_redeemed)
    return LoyaltyCard(
        stamps=stamps,
        total_stamps=TOTAL_STAMPS_ON_CARD,
        hearts=hearts,
        mimos_earned=earned,
        mimos_redeemed=redeemed,
        mimos_available=max(0, earned - redeemed),
    )


class ClientService:
    """Use case: manage clients, their packages and loyalty card."""

    def __init__(self, clients: ClientRepository):
        self._clients = clients

    def list_clients(self) -> Sequence[Client]:
        return self._clients.list_all()

    def get_client(self, client_id: str) -> Client:
        client = self._clients.get_by_id(client_id)
        if not client:
            raise NotFoundError("Cliente não encontrado.")
        return client

    def find_by_name(self, name: str) -> Optional[Client]:
        return find_client_by_name(self._clients.list_all(), name)

    def _validated(self, name: str, email: str, phone: str) -> tuple[str, str, str]:
        return (
            require_min_length(name, "Nome", MIN_CLIENT_NAME_LENGTH),
            optional_email(email),
            optional_phone(phone, min_digits=MIN_PHONE_DIGITS),
        )

    def create_client(self, *, name: str, email: str = "", phone: str = "") -> str:
        name, email, phone = self._validated(name, email, phone)
        if email and self._clients.get_by_email(email):
            raise ValidationError("Já existe um cliente com este e-mail.")
        client_id = self._clients.create(name=name, email=email, phone=phone)
        logger.info("Client created: %s (%s)", name, client_id)
        return client_id

    def update_client(self, client_id: str, *, name: str, email: str = "", phone: str = "") -> None:
        self.get_client(client_id)
        name, email, phone = self._validated(name, email, phone)
        if email:
            other = self._clients.get_by_email(email)
            if other and other.client_id != client_id:
                raise ValidationError("Já existe um cliente com este e-mail.")
        self._clients.update_fields(client_id, name=name, email=email, phone=phone)

    def delete_client(self, client_id: str) -> None:
        self.get_client(client_id)
        self._clients.delete(client_id)
        logger.info("Client deleted: %s", client_id)

    def purchase_package(self, client_id: str, package: SalonPackage, *, purchase_date: date) -> ClientPackageInstance:
        self.get_client(client_id)
        if package.status != CatalogStatus.ACTIVE:
            raise ValidationError("Pacote inativo não pode ser vendido.")
        balances = [PackageServiceBalance(service_id=i.service_id, remaining_quantity=i.quantity) for i in package.services]
        instance = self._clients.add_package_instance(
            client_id,
            package_id=package.package_id,
            package_name=package.name,
            services=balances,
            purchase_date=purchase_date,
            expiry_date=purchase_date + timedelta(days=package.validity_days),
        )
        logger.info("Client %s bought package %s (instance %s)", client_id, package.name, instance.instance_id)
        return instance

    def loyalty_card(self, client_id: str) -> LoyaltyCard:
        return loyalty_card_for(self.get_client(client_id))

    def redeem_mimo(self, client_id: str) -> LoyaltyCard:
        client = self.get_client(client_id)
        card = loyalty_card_for(client)
        if card.mimos_available <= 0:
            raise ValidationError("Nenhum mimo disponível para resgate.")
        self._clients.set_mimos_redeemed(client_id, client.mimos_redeemed + 1)
        logger.info("Client %s redeemed a mimo", client_id)
        return loyalty_card_for(self.get_client(client_id))


class ClientPortalService:
    """Use case: client area login (separate from staff accounts)."""

    def __init__(self, clients: ClientRepository, *, admin_email: str):
        self._clients = clients
        self._admin_email = (admin_email or "").strip().lower()

    def _reject_admin(self, email: str) -> None:
        if self._admin_email and email.lower() == self._admin_email:
            raise AuthenticationError("Administradores não podem acessar a área do cliente por este login.")

    def authenticate(self, email: str, password: str) -> Client:
        email = (email or "").strip()
        if not email or not password:
            raise AuthenticationError("Email e senha são obrigatórios.")
        self._reject_admin(email)

        client = self._clients.get_by_email(email)
        if not client or not client.password_hash:
            raise AuthenticationError("E-mail ou senha inválidos.")
        try:
            ok = check_password_hash(client.password_hash, password)
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("E-mail ou senha inválidos.")
        return client

    def register(self, email: str, password: str) -> Client:
        """Enable portal access for a client already registered by the salon."""

        email = require_non_empty(email, "E-mail")
        self._reject_admin(email)
        require_min_length(password, "Senha", 6)

        client = self._clients.get_by_email(email)
        if not client:
            raise ValidationError("Nenhum cliente cadastrado com este e-mail. Procure o salão.")
        if client.password_hash:
            raise ValidationError("Este e-mail já possui acesso. Faça login.")
        self._clients.set_password_hash(client.client_id, generate_password_hash(password))
        logger.info("Client portal access enabled for %s", client.client_id)
        return client

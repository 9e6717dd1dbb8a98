from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .appointments.completion import CompletionWorkflow
from .appointments.firestore_appointment_repository import FirestoreAppointmentRepository
from .appointments.repository import AppointmentRepository
from .appointments.service import AppointmentService
from .catalog.firestore_catalog_repository import FirestorePackageRepository, FirestoreServiceRepository
from .catalog.repository import PackageRepository, ServiceRepository
from .catalog.service import CatalogService
from .clients.firestore_client_repository import FirestoreClientRepository
from .clients.repository import ClientRepository
from .clients.service import ClientPortalService, ClientService
from .core.enums import PackageDebitPolicy
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, FirestoreConfig
from .finance.firestore_transaction_repository import FirestoreTransactionRepository
from .finance.repository import TransactionRepository
from .finance.service import CashFlowService
from .professionals.firestore_professional_repository import FirestoreProfessionalRepository
from .professionals.repository import ProfessionalRepository
from .professionals.service import ProfessionalService
from .settings.firestore_settings_repository import FirestoreSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.firestore_admin_repository import FirestoreAdminRepository
from .users.repository import AdminRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    settings_repo: SettingsRepository
    services_repo: ServiceRepository
    packages_repo: PackageRepository
    clients_repo: ClientRepository
    professionals_repo: ProfessionalRepository
    appointments_repo: AppointmentRepository
    transactions_repo: TransactionRepository
    admins_repo: AdminRepository

    settings_service: SettingsService
    catalog_service: CatalogService
    client_service: ClientService
    client_portal_service: ClientPortalService
    professional_service: ProfessionalService
    cash_flow_service: CashFlowService
    completion_workflow: CompletionWorkflow
    appointment_service: AppointmentService
    dashboard_service: DashboardService
    auth_service: AuthService

    whatsapp_number: str
    admin_email: str


def assemble_container(
    *,
    conn: Optional[DatabaseConnection],
    settings_repo: SettingsRepository,
    services_repo: ServiceRepository,
    packages_repo: PackageRepository,
    clients_repo: ClientRepository,
    professionals_repo: ProfessionalRepository,
    appointments_repo: AppointmentRepository,
    transactions_repo: TransactionRepository,
    admins_repo: AdminRepository,
    debit_policy: PackageDebitPolicy = PackageDebitPolicy.FIRST_DEBIT_ONLY,
    admin_email: str = "",
    whatsapp_number: str = "",
) -> Container:
    """Wire services on top of the given repositories (Firestore or in-memory)."""

    settings_service = SettingsService(settings_repo)
    catalog_service = CatalogService(services_repo, packages_repo)
    client_service = ClientService(clients_repo)
    client_portal_service = ClientPortalService(clients_repo, admin_email=admin_email)
    professional_service = ProfessionalService(professionals_repo)
    cash_flow_service = CashFlowService(transactions_repo)
    completion_workflow = CompletionWorkflow(clients_repo, cash_flow_service, policy=debit_policy)
    appointment_service = AppointmentService(
        appointments_repo,
        clients_repo,
        professionals_repo,
        catalog_service,
        completion_workflow,
    )
    dashboard_service = DashboardService(appointments_repo, clients_repo)
    auth_service = AuthService(admins_repo)

    return Container(
        conn=conn,
        settings_repo=settings_repo,
        services_repo=services_repo,
        packages_repo=packages_repo,
        clients_repo=clients_repo,
        professionals_repo=professionals_repo,
        appointments_repo=appointments_repo,
        transactions_repo=transactions_repo,
        admins_repo=admins_repo,
        settings_service=settings_service,
        catalog_service=catalog_service,
        client_service=client_service,
        client_portal_service=client_portal_service,
        professional_service=professional_service,
        cash_flow_service=cash_flow_service,
        completion_workflow=completion_workflow,
        appointment_service=appointment_service,
        dashboard_service=dashboard_service,
        auth_service=auth_service,
        whatsapp_number=whatsapp_number,
        admin_email=admin_email,
    )


def build_container(
    *,
    firestore_config: dict,
    debit_policy: str = PackageDebitPolicy.FIRST_DEBIT_ONLY.value,
    admin_email: str = "",
    whatsapp_number: str = "",
) -> Container:
    config = FirestoreConfig(
        project_id=str(firestore_config["project_id"]),
        credentials_path=firestore_config.get("credentials_path") or None,
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble_container(
        conn=conn,
        settings_repo=FirestoreSettingsRepository(conn),
        services_repo=FirestoreServiceRepository(conn),
        packages_repo=FirestorePackageRepository(conn),
        clients_repo=FirestoreClientRepository(conn),
        professionals_repo=FirestoreProfessionalRepository(conn),
        appointments_repo=FirestoreAppointmentRepository(conn),
        transactions_repo=FirestoreTransactionRepository(conn),
        admins_repo=FirestoreAdminRepository(conn),
        debit_policy=PackageDebitPolicy(debit_policy),
        admin_email=admin_email,
        whatsapp_number=whatsapp_number,
    )

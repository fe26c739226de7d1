"""
Database initializer: migrate the three databases, then seed default roles and users,
identity server clients/resources and sample application rows. Every step checks for
existing rows first, so running it on each startup is safe.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from identity_server import configuration_models
from identity_server.config import ADMIN_PASSWORD, LOG_TABLE_NAME, USER_PASSWORD
from identity_server.database import (
    ApplicationSession,
    ConfigurationSession,
    PersistedGrantSession,
    migrate_application,
    migrate_configuration,
    migrate_persisted_grants,
)
from identity_server.identity import Claim, RoleManager, UserManager
from identity_server.identity_config import get_api_resources, get_clients, get_identity_resources
from identity_server.mappers import to_entity
from identity_server.models import ApiLogItem, ApplicationUser, Role, Todo, UserProfile
from identity_shared.permissions import (
    ApplicationPermissions,
    ClaimConstants,
    DefaultRoleNames,
    JwtClaimTypes,
)

logger = logging.getLogger(__name__)

SAMPLE_USER_NAME = "user"
SAMPLE_PHONE_NUMBER = "+1 (123) 456-7890"

# Default layout of the SQL Server log sink table
LOG_TABLE_SQL = f"""IF (EXISTS (SELECT * FROM INFORMATION_SCHEMA.TABLES WHERE TABLE_SCHEMA = 'dbo' AND TABLE_NAME = '{LOG_TABLE_NAME}'))
PRINT 'Table Exists';
ELSE
CREATE TABLE [dbo].[{LOG_TABLE_NAME}] (
[Id]              INT            IDENTITY (1, 1) NOT NULL,
[Message]         NVARCHAR (MAX) NULL,
[MessageTemplate] NVARCHAR (MAX) NULL,
[Level]           NVARCHAR (MAX) NULL,
[TimeStamp]       DATETIME       NULL,
[Exception]       NVARCHAR (MAX) NULL,
[Properties]      NVARCHAR (MAX) NULL,
CONSTRAINT [PK_{LOG_TABLE_NAME}] PRIMARY KEY CLUSTERED ([Id] ASC)
);"""


class SeedError(Exception):
    """Default roles or users could not be created."""


class DatabaseInitializer:
    def __init__(
        self,
        context: Session,
        persisted_grant_context: Session,
        configuration_context: Session,
        user_manager: UserManager | None = None,
        role_manager: RoleManager | None = None,
    ):
        self.context = context
        self.persisted_grant_context = persisted_grant_context
        self.configuration_context = configuration_context
        self.user_manager = user_manager or UserManager(context)
        self.role_manager = role_manager or RoleManager(context)

    def seed(self) -> None:
        """Run every seeding step in order. Only log table errors are tolerated."""
        self.migrate()
        self.seed_identity()
        self.seed_identity_server()
        self.seed_sample_data()

        # Log table must exist before the SQL log sink can write, even on a fresh database
        try:
            self.ensure_log_table_creation()
        except DBAPIError:
            logger.exception("error while creating sql log table")

    def migrate(self) -> None:
        migrate_application(self.context.get_bind())
        migrate_persisted_grants(self.persisted_grant_context.get_bind())
        migrate_configuration(self.configuration_context.get_bind())

    def ensure_log_table_creation(self) -> None:
        """Create the SQL Server log table if missing. Other databases have no SQL log sink."""
        engine = self.context.get_bind()
        if engine.dialect.name != "mssql":
            return
        with engine.execution_options(isolation_level="SERIALIZABLE").begin() as conn:
            conn.execute(text(LOG_TABLE_SQL))

    def seed_identity(self) -> None:
        """
        Empty user table: create the default roles and the inbuilt admin/user accounts.
        Otherwise bring the administrator's permission claims in line with the permission list.
        """
        if self.context.query(ApplicationUser).first() is None:
            admin_role_name = DefaultRoleNames.ADMINISTRATOR
            user_role_name = DefaultRoleNames.USER

            self.ensure_role(admin_role_name, "Default administrator", ApplicationPermissions.get_all_permission_values())
            self.ensure_role(user_role_name, "Default user", [])

            self.create_user(
                "admin", ADMIN_PASSWORD, "Admin", "Admin Blazor", "Blazor",
                "admin@blazorboilerplate.com", SAMPLE_PHONE_NUMBER, [admin_role_name],
            )
            self.create_user(
                SAMPLE_USER_NAME, USER_PASSWORD, "User", "User Blazor", "Blazor",
                "user@blazorboilerplate.com", SAMPLE_PHONE_NUMBER, [user_role_name],
            )
            logger.info("Inbuilt account generation completed")
        else:
            self.reconcile_permissions()

    def reconcile_permissions(self) -> None:
        """Add new permissions to the administrator role; strip deprecated ones from every role."""
        admin_role = self.role_manager.find_by_name(DefaultRoleNames.ADMINISTRATOR)
        if admin_role is None:
            logger.warning("Role %s is missing; recreating it", DefaultRoleNames.ADMINISTRATOR)
            self.ensure_role(
                DefaultRoleNames.ADMINISTRATOR,
                "Default administrator",
                ApplicationPermissions.get_all_permission_values(),
            )
            return

        all_claims = list(dict.fromkeys(ApplicationPermissions.get_all_permission_values()))
        role_claims = [
            c.value for c in self.role_manager.get_claims(admin_role) if c.type == ClaimConstants.PERMISSION
        ]

        new_claims = [c for c in all_claims if c not in role_claims]
        for claim in new_claims:
            self.role_manager.add_claim(admin_role, Claim(ClaimConstants.PERMISSION, claim))

        deprecated_claims = [c for c in dict.fromkeys(role_claims) if c not in all_claims]
        roles = self.role_manager.roles()
        for claim in deprecated_claims:
            for role in roles:
                self.role_manager.remove_claim(role, Claim(ClaimConstants.PERMISSION, claim))

        if new_claims or deprecated_claims:
            logger.info(
                "Permission claims reconciled: %d added, %d removed",
                len(new_claims),
                len(deprecated_claims),
            )

    def ensure_role(self, role_name: str, description: str, claims: list[str] | None) -> None:
        """
        Create the role with the given permission claims unless it exists.
        Unknown permission values raise SeedError; if a claim cannot be added the role is deleted.
        """
        if self.role_manager.find_by_name(role_name) is not None:
            logger.debug("Role already exists: %s", role_name)
            return
        if claims is None:
            claims = []

        invalid_claims = [c for c in claims if ApplicationPermissions.get_permission_by_value(c) is None]
        if invalid_claims:
            raise SeedError("The following claim types are invalid: " + ", ".join(invalid_claims))

        result = self.role_manager.create(Role(name=role_name, description=description))
        if not result.succeeded:
            raise SeedError(result.errors[0].description)
        role = self.role_manager.find_by_name(role_name)

        for claim in dict.fromkeys(claims):
            permission = ApplicationPermissions.get_permission_by_value(claim)
            result = self.role_manager.add_claim(role, Claim(ClaimConstants.PERMISSION, permission.value))
            if not result.succeeded:
                logger.warning(
                    "Could not add claim %s to role %s (%s); deleting role",
                    claim,
                    role_name,
                    "; ".join(e.description for e in result.errors),
                )
                self.role_manager.delete(role)
                return
        logger.info("Seeded role: %s", role_name)

    def create_user(
        self,
        user_name: str,
        password: str,
        first_name: str,
        full_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        roles: list[str],
    ) -> ApplicationUser | None:
        """
        Return the existing user, or create it with profile claims and role membership.
        Returns None when role membership failed and the new user was deleted again.
        """
        application_user = self.user_manager.find_by_name(user_name)
        if application_user is not None:
            logger.debug("User already exists: %s", user_name)
            return application_user

        application_user = ApplicationUser(
            user_name=user_name,
            email=email,
            phone_number=phone_number,
            full_name=full_name,
            first_name=first_name,
            last_name=last_name,
            email_confirmed=True,
        )
        result = self.user_manager.create(application_user, password)
        if not result.succeeded:
            raise SeedError(result.errors[0].description)

        self.user_manager.add_claims(
            application_user,
            [
                Claim(JwtClaimTypes.NAME, user_name),
                Claim(JwtClaimTypes.GIVEN_NAME, first_name),
                Claim(JwtClaimTypes.FAMILY_NAME, last_name),
                Claim(JwtClaimTypes.EMAIL, email),
                Claim(JwtClaimTypes.EMAIL_VERIFIED, "true"),
                Claim(JwtClaimTypes.PHONE_NUMBER, phone_number),
            ],
        )

        distinct_roles = list(dict.fromkeys(roles))
        # Claims version of the roles
        for role in distinct_roles:
            self.user_manager.add_claim(application_user, Claim(f"Is{role}", "true"))

        user = self.user_manager.find_by_name(application_user.user_name)
        try:
            result = self.user_manager.add_to_roles(user, distinct_roles)
        except Exception:
            self.context.rollback()
            self.user_manager.delete(user)
            raise

        if not result.succeeded:
            logger.warning(
                "Could not add user %s to roles %s; deleting user",
                user_name,
                ", ".join(distinct_roles),
            )
            self.user_manager.delete(user)
            return None
        logger.info("Seeded user: %s", user_name)
        return application_user

    def seed_identity_server(self) -> None:
        """Insert the default clients, identity resources and API resources into empty tables."""
        db = self.configuration_context
        if db.query(configuration_models.Client).first() is None:
            logger.info("Seeding IdentityServer Clients")
            for client in get_clients():
                db.add(to_entity(client))
            db.commit()
        if db.query(configuration_models.IdentityResource).first() is None:
            logger.info("Seeding IdentityServer Identity Resources")
            for resource in get_identity_resources():
                db.add(to_entity(resource))
            db.commit()
        if db.query(configuration_models.ApiResource).first() is None:
            logger.info("Seeding IdentityServer API Resources")
            for resource in get_api_resources():
                db.add(to_entity(resource))
            db.commit()

    def seed_sample_data(self) -> None:
        """Sample profile, todos and API log rows. Profile and log rows belong to the sample user."""
        db = self.context
        user = self.user_manager.find_by_name(SAMPLE_USER_NAME)
        if user is None:
            logger.warning("User %s not found; skipping sample profile and API log rows", SAMPLE_USER_NAME)
        now = datetime.now(timezone.utc)

        if user is not None and db.query(UserProfile).first() is None:
            db.add(
                UserProfile(
                    user_id=user.id,
                    count=2,
                    is_nav_open=True,
                    last_page_visited="/dashboard",
                    is_nav_minified=False,
                    last_updated_date=now,
                )
            )

        if db.query(Todo).first() is None:
            db.add_all(
                [
                    Todo(is_completed=False, title="Test Blazor Boilerplate"),
                    Todo(is_completed=False, title="Test Blazor Boilerplate 1"),
                ]
            )

        if user is not None and db.query(ApiLogItem).first() is None:
            db.add_all(
                [
                    ApiLogItem(
                        request_time=now,
                        response_millis=30,
                        status_code=200,
                        method="Get",
                        path="/api/seed",
                        query_string="",
                        request_body="",
                        response_body="",
                        ip_address="::1",
                        application_user_id=user.id,
                    )
                    for _ in range(2)
                ]
            )

        db.commit()


def seed_database() -> None:
    """Open one session per database and run the initializer."""
    db = ApplicationSession()
    grants = PersistedGrantSession()
    configuration = ConfigurationSession()
    try:
        DatabaseInitializer(db, grants, configuration).seed()
    finally:
        configuration.close()
        grants.close()
        db.close()

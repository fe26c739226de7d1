"""
User and role management over the application database: password hashing, claims,
role membership. Validation failures come back as IdentityResult, not exceptions.
"""
import logging
import secrets
from dataclasses import dataclass, field

import bcrypt
from sqlalchemy.orm import Session

from identity_server.config import PASSWORD_MIN_LENGTH
from identity_server.models import ApplicationUser, Role, RoleClaim, UserClaim, UserRole

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    # Bcrypt has a 72-byte limit
    raw = password.encode("utf-8")
    if len(raw) > 72:
        raw = raw[:72]
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    raw = plain.encode("utf-8")[:72]
    return bcrypt.checkpw(raw, hashed.encode("utf-8"))


def normalize(value: str | None) -> str | None:
    return value.strip().upper() if value is not None else None


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


@dataclass(frozen=True)
class IdentityError:
    code: str
    description: str


@dataclass
class IdentityResult:
    succeeded: bool
    errors: list[IdentityError] = field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))


class UserManager:
    def __init__(self, db: Session, password_min_length: int = PASSWORD_MIN_LENGTH):
        self.db = db
        self.password_min_length = password_min_length

    def find_by_name(self, user_name: str) -> ApplicationUser | None:
        return (
            self.db.query(ApplicationUser)
            .filter(ApplicationUser.normalized_user_name == normalize(user_name))
            .first()
        )

    def _validate_password(self, password: str | None) -> list[IdentityError]:
        if not password or len(password) < self.password_min_length:
            return [
                IdentityError(
                    "PasswordTooShort",
                    f"Passwords must be at least {self.password_min_length} characters.",
                )
            ]
        return []

    def create(self, user: ApplicationUser, password: str) -> IdentityResult:
        """Hash the password and insert the user. Fails on a weak password or a taken user name."""
        errors = self._validate_password(password)
        if not user.user_name:
            errors.append(IdentityError("InvalidUserName", "User name is required."))
        elif self.find_by_name(user.user_name) is not None:
            errors.append(
                IdentityError("DuplicateUserName", f"User name '{user.user_name}' is already taken.")
            )
        if errors:
            return IdentityResult.failed(*errors)
        user.normalized_user_name = normalize(user.user_name)
        user.normalized_email = normalize(user.email)
        user.password_hash = hash_password(password)
        user.security_stamp = secrets.token_hex(16)
        self.db.add(user)
        self.db.commit()
        logger.debug("Created user %s", user.user_name)
        return IdentityResult.success()

    def check_password(self, user: ApplicationUser, password: str) -> bool:
        if not user.password_hash:
            return False
        return verify_password(password, user.password_hash)

    def get_claims(self, user: ApplicationUser) -> list[Claim]:
        rows = self.db.query(UserClaim).filter(UserClaim.user_id == user.id).order_by(UserClaim.id).all()
        return [Claim(r.claim_type, r.claim_value) for r in rows]

    def add_claims(self, user: ApplicationUser, claims: list[Claim]) -> IdentityResult:
        for claim in claims:
            self.db.add(UserClaim(user_id=user.id, claim_type=claim.type, claim_value=claim.value))
        self.db.commit()
        return IdentityResult.success()

    def add_claim(self, user: ApplicationUser, claim: Claim) -> IdentityResult:
        return self.add_claims(user, [claim])

    def get_roles(self, user: ApplicationUser) -> list[str]:
        rows = (
            self.db.query(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user.id)
            .order_by(Role.name)
            .all()
        )
        return [r[0] for r in rows]

    def add_to_roles(self, user: ApplicationUser, role_names: list[str]) -> IdentityResult:
        """
        Add the user to each role. Unknown role names raise ValueError;
        an existing membership is a failed result and nothing is added.
        """
        current = {normalize(n) for n in self.get_roles(user)}
        links = []
        for name in role_names:
            role = self.db.query(Role).filter(Role.normalized_name == normalize(name)).first()
            if role is None:
                raise ValueError(f"Role {name} does not exist.")
            if role.normalized_name in current:
                return IdentityResult.failed(
                    IdentityError("UserAlreadyInRole", f"User already in role '{name}'.")
                )
            current.add(role.normalized_name)
            links.append(UserRole(user_id=user.id, role_id=role.id))
        self.db.add_all(links)
        self.db.commit()
        return IdentityResult.success()

    def delete(self, user: ApplicationUser) -> IdentityResult:
        self.db.delete(user)
        self.db.commit()
        logger.info("Deleted user %s", user.user_name)
        return IdentityResult.success()


class RoleManager:
    def __init__(self, db: Session):
        self.db = db

    def roles(self) -> list[Role]:
        return self.db.query(Role).order_by(Role.name).all()

    def find_by_name(self, name: str) -> Role | None:
        return self.db.query(Role).filter(Role.normalized_name == normalize(name)).first()

    def create(self, role: Role) -> IdentityResult:
        if not role.name:
            return IdentityResult.failed(IdentityError("InvalidRoleName", "Role name is required."))
        if self.find_by_name(role.name) is not None:
            return IdentityResult.failed(
                IdentityError("DuplicateRoleName", f"Role name '{role.name}' is already taken.")
            )
        role.normalized_name = normalize(role.name)
        self.db.add(role)
        self.db.commit()
        return IdentityResult.success()

    def get_claims(self, role: Role) -> list[Claim]:
        rows = self.db.query(RoleClaim).filter(RoleClaim.role_id == role.id).order_by(RoleClaim.id).all()
        return [Claim(r.claim_type, r.claim_value) for r in rows]

    def add_claim(self, role: Role, claim: Claim) -> IdentityResult:
        if not claim.type or not claim.value:
            return IdentityResult.failed(IdentityError("InvalidClaim", "Claim type and value are required."))
        if claim in self.get_claims(role):
            return IdentityResult.failed(
                IdentityError("DuplicateRoleClaim", f"Role already has claim {claim.type}={claim.value}.")
            )
        self.db.add(RoleClaim(role_id=role.id, claim_type=claim.type, claim_value=claim.value))
        self.db.commit()
        return IdentityResult.success()

    def remove_claim(self, role: Role, claim: Claim) -> IdentityResult:
        """Remove every claim on the role matching both type and value."""
        (
            self.db.query(RoleClaim)
            .filter(
                RoleClaim.role_id == role.id,
                RoleClaim.claim_type == claim.type,
                RoleClaim.claim_value == claim.value,
            )
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return IdentityResult.success()

    def delete(self, role: Role) -> IdentityResult:
        self.db.delete(role)
        self.db.commit()
        logger.info("Deleted role %s", role.name)
        return IdentityResult.success()

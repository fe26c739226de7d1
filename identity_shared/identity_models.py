"""
Identity server configuration models (clients, identity resources, API resources).
Plain dataclasses; identity_server.mappers converts them to and from database rows.
"""
from dataclasses import dataclass, field, fields

from identity_shared.permissions import JwtClaimTypes

GRANT_AUTHORIZATION_CODE = "authorization_code"
GRANT_CLIENT_CREDENTIALS = "client_credentials"

SCOPE_OPENID = "openid"
SCOPE_PROFILE = "profile"
SCOPE_EMAIL = "email"
SCOPE_PHONE = "phone"


@dataclass
class Secret:
    """Client secret. value is plain text here; it is hashed when stored."""
    value: str
    description: str | None = None


@dataclass
class Client:
    client_id: str
    client_name: str | None = None
    enabled: bool = True
    allowed_grant_types: list[str] = field(default_factory=list)
    client_secrets: list[Secret] = field(default_factory=list)
    require_client_secret: bool = True
    require_pkce: bool = True
    allow_offline_access: bool = False
    redirect_uris: list[str] = field(default_factory=list)
    post_logout_redirect_uris: list[str] = field(default_factory=list)
    allowed_cors_origins: list[str] = field(default_factory=list)
    allowed_scopes: list[str] = field(default_factory=list)
    access_token_lifetime: int = 3600


@dataclass
class IdentityResource:
    name: str
    display_name: str | None = None
    description: str | None = None
    enabled: bool = True
    required: bool = False
    emphasize: bool = False
    show_in_discovery_document: bool = True
    user_claims: list[str] = field(default_factory=list)

    @classmethod
    def open_id(cls) -> "IdentityResource":
        return cls(
            name=SCOPE_OPENID,
            display_name="Your user identifier",
            required=True,
            user_claims=[JwtClaimTypes.SUBJECT],
        )

    @classmethod
    def profile(cls) -> "IdentityResource":
        return cls(
            name=SCOPE_PROFILE,
            display_name="User profile",
            description="Your user profile information (first name, last name, etc.)",
            emphasize=True,
            user_claims=[
                JwtClaimTypes.NAME,
                JwtClaimTypes.FAMILY_NAME,
                JwtClaimTypes.GIVEN_NAME,
                JwtClaimTypes.PREFERRED_USERNAME,
                JwtClaimTypes.PROFILE,
                JwtClaimTypes.PICTURE,
                JwtClaimTypes.WEBSITE,
                JwtClaimTypes.UPDATED_AT,
            ],
        )

    @classmethod
    def email(cls) -> "IdentityResource":
        return cls(
            name=SCOPE_EMAIL,
            display_name="Your email address",
            emphasize=True,
            user_claims=[JwtClaimTypes.EMAIL, JwtClaimTypes.EMAIL_VERIFIED],
        )

    @classmethod
    def phone(cls) -> "IdentityResource":
        return cls(
            name=SCOPE_PHONE,
            display_name="Your phone number",
            emphasize=True,
            user_claims=[JwtClaimTypes.PHONE_NUMBER, JwtClaimTypes.PHONE_NUMBER_VERIFIED],
        )


@dataclass
class ApiResource:
    name: str
    display_name: str | None = None
    description: str | None = None
    enabled: bool = True
    show_in_discovery_document: bool = True
    user_claims: list[str] = field(default_factory=list)
    scopes: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Public field values; private (non-init) fields are left out."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}

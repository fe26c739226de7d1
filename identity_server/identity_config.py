"""
Default identity server configuration seeded into an empty configuration database.
"""
from identity_server.config import (
    ACCESS_TOKEN_LIFETIME,
    API_DISPLAY_NAME,
    API_RESOURCE_NAME,
    APP_BASE_URL,
    SAMPLE_CLIENT_SECRET,
)
from identity_shared.identity_models import (
    GRANT_AUTHORIZATION_CODE,
    GRANT_CLIENT_CREDENTIALS,
    SCOPE_EMAIL,
    SCOPE_OPENID,
    SCOPE_PHONE,
    SCOPE_PROFILE,
    ApiResource,
    Client,
    IdentityResource,
    Secret,
)
from identity_shared.permissions import JwtClaimTypes

CLIENT_CREDENTIALS_CLIENT_ID = "clientToDo"
WEB_CLIENT_ID = "blazorboilerplate-web"


def get_identity_resources() -> list[IdentityResource]:
    return [
        IdentityResource.open_id(),
        IdentityResource.profile(),
        IdentityResource.email(),
        IdentityResource.phone(),
    ]


def get_api_resources() -> list[ApiResource]:
    return [
        ApiResource(
            name=API_RESOURCE_NAME,
            display_name=API_DISPLAY_NAME,
            user_claims=[
                JwtClaimTypes.NAME,
                JwtClaimTypes.EMAIL,
                JwtClaimTypes.PHONE_NUMBER,
                JwtClaimTypes.ROLE,
            ],
            scopes=[API_RESOURCE_NAME],
        )
    ]


def get_clients() -> list[Client]:
    return [
        # Machine to machine: no interactive user
        Client(
            client_id=CLIENT_CREDENTIALS_CLIENT_ID,
            client_name="Todo API client",
            allowed_grant_types=[GRANT_CLIENT_CREDENTIALS],
            client_secrets=[Secret(SAMPLE_CLIENT_SECRET, "Sample client secret")],
            require_pkce=False,
            allowed_scopes=[API_RESOURCE_NAME],
            access_token_lifetime=ACCESS_TOKEN_LIFETIME,
        ),
        # Browser client: authorization code with PKCE, public (no secret)
        Client(
            client_id=WEB_CLIENT_ID,
            client_name="Blazor Boilerplate web client",
            allowed_grant_types=[GRANT_AUTHORIZATION_CODE],
            require_client_secret=False,
            require_pkce=True,
            allow_offline_access=True,
            redirect_uris=[f"{APP_BASE_URL}/authentication/login-callback"],
            post_logout_redirect_uris=[f"{APP_BASE_URL}/authentication/logout-callback"],
            allowed_cors_origins=[APP_BASE_URL],
            allowed_scopes=[SCOPE_OPENID, SCOPE_PROFILE, SCOPE_EMAIL, SCOPE_PHONE, API_RESOURCE_NAME],
            access_token_lifetime=ACCESS_TOKEN_LIFETIME,
        ),
    ]

"""
Map identity server configuration models to database rows and back.
"""
import json
from datetime import datetime, timezone

from identity_server import configuration_models as entities
from identity_server.identity import hash_password
from identity_shared import identity_models as models


def client_to_entity(client: models.Client) -> entities.Client:
    secrets = [{"value": hash_password(s.value), "description": s.description} for s in client.client_secrets]
    return entities.Client(
        client_id=client.client_id,
        client_name=client.client_name,
        enabled=client.enabled,
        require_client_secret=client.require_client_secret,
        require_pkce=client.require_pkce,
        allow_offline_access=client.allow_offline_access,
        access_token_lifetime=client.access_token_lifetime,
        allowed_grant_types=json.dumps(client.allowed_grant_types),
        redirect_uris=json.dumps(client.redirect_uris),
        post_logout_redirect_uris=json.dumps(client.post_logout_redirect_uris),
        allowed_cors_origins=json.dumps(client.allowed_cors_origins),
        allowed_scopes=json.dumps(client.allowed_scopes),
        client_secrets=json.dumps(secrets),
    )


def identity_resource_to_entity(resource: models.IdentityResource) -> entities.IdentityResource:
    return entities.IdentityResource(
        name=resource.name,
        display_name=resource.display_name,
        description=resource.description,
        enabled=resource.enabled,
        required=resource.required,
        emphasize=resource.emphasize,
        show_in_discovery_document=resource.show_in_discovery_document,
        user_claims=json.dumps(resource.user_claims),
    )


def api_resource_to_entity(resource: models.ApiResource) -> entities.ApiResource:
    return entities.ApiResource(
        name=resource.name,
        display_name=resource.display_name,
        description=resource.description,
        enabled=resource.enabled,
        show_in_discovery_document=resource.show_in_discovery_document,
        user_claims=json.dumps(resource.user_claims),
        scopes=json.dumps(resource.scopes),
        properties=json.dumps(resource.properties),
    )


def to_entity(model):
    """Map any configuration model to its row type."""
    if isinstance(model, models.Client):
        return client_to_entity(model)
    if isinstance(model, models.IdentityResource):
        return identity_resource_to_entity(model)
    if isinstance(model, models.ApiResource):
        return api_resource_to_entity(model)
    raise TypeError(f"No entity mapping for {type(model).__name__}")


def api_resource_to_model(entity: entities.ApiResource) -> models.ApiResource:
    return models.ApiResource(
        name=entity.name,
        display_name=entity.display_name,
        description=entity.description,
        enabled=entity.enabled,
        show_in_discovery_document=entity.show_in_discovery_document,
        user_claims=json.loads(entity.user_claims),
        scopes=json.loads(entity.scopes),
        properties=json.loads(entity.properties),
    )


def update_api_resource_entity(entity: entities.ApiResource, model: models.ApiResource) -> None:
    """Copy editable fields onto an existing row. The name is the key and is not changed."""
    entity.display_name = model.display_name
    entity.description = model.description
    entity.enabled = model.enabled
    entity.show_in_discovery_document = model.show_in_discovery_document
    entity.user_claims = json.dumps(model.user_claims)
    entity.scopes = json.dumps(model.scopes)
    entity.properties = json.dumps(model.properties)
    entity.updated_at = datetime.now(timezone.utc)

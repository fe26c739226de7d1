"""
Admin API for identity server API resources. Edits go through ApiResourceDto:
state is saved before changes and restored when the edited resource is rejected.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.orm import Session

from identity_server.configuration_models import ApiResource
from identity_server.database import get_configuration_db
from identity_server.mappers import api_resource_to_model, update_api_resource_entity
from identity_shared.api_resource_dto import ApiResourceDto

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin")


class ApiResourceUpdate(BaseModel):
    """Editable API resource fields. Only fields present in the request are applied."""
    model_config = ConfigDict(strict=True)

    name: str | None = None
    display_name: str | None = None
    description: str | None = None
    enabled: bool = True
    show_in_discovery_document: bool = True
    scopes: list[str] = Field(default_factory=list)
    user_claims_text: str | None = None


def _get_resource_or_404(db: Session, name: str) -> ApiResource:
    entity = db.query(ApiResource).filter(ApiResource.name == name).first()
    if entity is None:
        raise HTTPException(
            status_code=404,
            detail={"error": "not_found", "error_description": f"API resource '{name}' not found"},
        )
    return entity


def _resource_dict(dto: ApiResourceDto) -> dict:
    data = dto.to_dict()
    data["user_claims_text"] = dto.user_claims_text
    return data


def _validate(dto: ApiResourceDto, name: str) -> str | None:
    """Return an error description, or None when the resource may be saved."""
    if dto.name != name:
        return "API resource name cannot be changed"
    if not dto.scopes:
        return "At least one scope is required"
    if any(not s.strip() for s in dto.scopes):
        return "Scopes must be non-empty strings"
    return None


def _reject(dto: ApiResourceDto, name: str, error: str) -> HTTPException:
    dto.restore_state()
    logger.debug("Rejected API resource update for %s: %s", name, error)
    return HTTPException(
        status_code=400,
        detail={"error": "invalid_request", "error_description": error, "resource": _resource_dict(dto)},
    )


@router.get("/api-resources")
def list_api_resources(db: Session = Depends(get_configuration_db)):
    rows = db.query(ApiResource).order_by(ApiResource.name).all()
    return [_resource_dict(ApiResourceDto.from_model(api_resource_to_model(r))) for r in rows]


@router.get("/api-resources/{name}")
def get_api_resource(name: str, db: Session = Depends(get_configuration_db)):
    entity = _get_resource_or_404(db, name)
    return _resource_dict(ApiResourceDto.from_model(api_resource_to_model(entity)))


@router.put("/api-resources/{name}")
def update_api_resource(
    name: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_configuration_db),
):
    """
    Apply the fields present in the body (user_claims_text is split on whitespace, ';' or ',').
    Invalid edits are rolled back on the DTO and answered with 400 and the unchanged resource.
    """
    entity = _get_resource_or_404(db, name)
    dto = ApiResourceDto.from_model(api_resource_to_model(entity))
    dto.save_state()

    try:
        update = ApiResourceUpdate.model_validate(payload)
    except ValidationError as e:
        err = e.errors()[0]
        location = ".".join(str(part) for part in err["loc"])
        raise _reject(dto, name, f"{location}: {err['msg']}") from e

    changes = update.model_dump(exclude_unset=True)
    user_claims_text = changes.pop("user_claims_text", None)
    for field_name, value in changes.items():
        setattr(dto, field_name, value)
    if "user_claims_text" in update.model_fields_set:
        dto.user_claims_text = user_claims_text or ""

    error = _validate(dto, name)
    if error is not None:
        raise _reject(dto, name, error)

    update_api_resource_entity(entity, dto)
    db.commit()
    dto.clear_state()
    logger.info("Updated API resource %s", name)
    return _resource_dict(dto)

"""
Tests for ApiResourceDto saved state and the user claims text field.
"""
from identity_shared.api_resource_dto import ApiResourceDto, join_lines, split_lines
from identity_shared.identity_models import ApiResource


def _dto() -> ApiResourceDto:
    return ApiResourceDto(
        name="api",
        display_name="API",
        description="Sample API",
        user_claims=["name", "email"],
        scopes=["api"],
        properties={"owner": "team"},
    )


def test_restore_state_returns_saved_values():
    dto = _dto()
    dto.save_state()

    dto.display_name = "Changed"
    dto.enabled = False
    dto.user_claims.append("role")
    dto.scopes = []
    dto.properties["owner"] = "someone else"

    dto.restore_state()
    assert dto == _dto()


def test_restore_state_can_be_repeated():
    dto = _dto()
    dto.save_state()
    dto.user_claims.append("role")
    dto.restore_state()
    dto.user_claims.append("phone_number")
    dto.restore_state()
    assert dto.user_claims == ["name", "email"]


def test_restore_without_saved_state_is_noop():
    dto = _dto()
    dto.display_name = "Changed"
    dto.restore_state()
    assert dto.display_name == "Changed"


def test_clear_state_discards_snapshot():
    dto = _dto()
    dto.save_state()
    dto.display_name = "Changed"
    dto.clear_state()
    dto.restore_state()
    assert dto.display_name == "Changed"


def test_user_claims_text_splits_on_whitespace_semicolon_and_comma():
    dto = _dto()
    dto.user_claims_text = "name email\tphone_number;role,website\n\n;;, picture "
    assert dto.user_claims == ["name", "email", "phone_number", "role", "website", "picture"]


def test_user_claims_text_joins_with_newlines():
    assert _dto().user_claims_text == "name\nemail"


def test_user_claims_text_empty_clears_claims():
    dto = _dto()
    dto.user_claims_text = ""
    assert dto.user_claims == []
    assert dto.user_claims_text == ""


def test_split_and_join_helpers():
    assert split_lines(None) == []
    assert split_lines(" ; , ") == []
    assert join_lines(["a"]) == "a"


def test_from_model_copies_lists():
    model = ApiResource(name="api", user_claims=["name"], scopes=["api"])
    dto = ApiResourceDto.from_model(model)
    dto.user_claims.append("email")
    assert model.user_claims == ["name"]
    assert dto.name == "api"


def test_to_dict_excludes_saved_state_and_claims_text():
    dto = _dto()
    dto.save_state()
    data = dto.to_dict()
    assert "_state" not in data
    assert "user_claims_text" not in data
    assert data["properties"] == {"owner": "team"}

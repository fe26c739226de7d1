"""
ApiResource data-transfer object for the admin API.
Adds a saved-state snapshot (save/restore/clear) and a text view of user_claims.
"""
import copy
import re
from dataclasses import dataclass, field, fields
from typing import Any, Iterable

from identity_shared.identity_models import ApiResource

_CLAIM_SEPARATORS = re.compile(r"\s+|;|,")


def split_lines(value: str | None) -> list[str]:
    """Split on whitespace runs, ';' or ','. Empty tokens are dropped."""
    if not value:
        return []
    return [item for item in _CLAIM_SEPARATORS.split(value) if item != ""]


def join_lines(values: Iterable[str]) -> str:
    return "\n".join(values)


@dataclass
class ApiResourceDto(ApiResource):
    _state: dict[str, Any] | None = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def from_model(cls, model: ApiResource) -> "ApiResourceDto":
        return cls(**copy.deepcopy(model.to_dict()))

    def save_state(self) -> None:
        """Snapshot every public field (deep copy)."""
        self._state = {
            f.name: copy.deepcopy(getattr(self, f.name)) for f in fields(self) if f.init
        }

    def restore_state(self) -> None:
        """Write the snapshot back onto this instance. No-op when nothing was saved."""
        if self._state is None:
            return
        for name, value in self._state.items():
            setattr(self, name, copy.deepcopy(value))

    def clear_state(self) -> None:
        self._state = None

    # Derived from user_claims; not part of to_dict()
    @property
    def user_claims_text(self) -> str:
        return join_lines(self.user_claims)

    @user_claims_text.setter
    def user_claims_text(self, value: str) -> None:
        self.user_claims = split_lines(value)

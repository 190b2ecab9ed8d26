from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected string for {key!r}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class QueueDecision:
    """Outcome of a /requests call: admitted (promoted=1) or still queued (promoted=0)."""

    promoted: int
    token: str | None = None
    slug: str | None = None
    response_id: str | None = None

    @property
    def is_promoted(self) -> bool:
        return self.promoted == 1

    @classmethod
    def fail_open(cls) -> QueueDecision:
        return cls(promoted=1)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> QueueDecision:
        if not isinstance(data, Mapping):
            raise ValueError(f"Expected object for result, got {type(data).__name__}")
        promoted = data.get("promoted")
        # bool is an int subclass; the API sends 0/1
        if not isinstance(promoted, int) or isinstance(promoted, bool):
            raise ValueError(f"Missing or invalid 'promoted' in result: {promoted!r}")
        return cls(
            promoted=promoted,
            token=_optional_str(data, "token"),
            slug=_optional_str(data, "slug"),
            response_id=_optional_str(data, "responseID"),
        )

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"promoted": self.promoted}
        if self.token is not None:
            data["token"] = self.token
        if self.slug is not None:
            data["slug"] = self.slug
        if self.response_id is not None:
            data["responseID"] = self.response_id
        return data

"""Base model class for records decoded from the platform API."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ApiModel(BaseModel):
    """Base model for API records.

    Unknown wire fields are ignored and ``null`` values fall back to the
    field default, so a sparse record decodes to zero values instead of
    failing validation.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def canonical_json(obj: Any) -> str:
    """Compact JSON with sorted keys, used for verbatim record storage."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))

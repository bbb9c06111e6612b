"""Base model for board API payloads and persisted records.

The board API speaks camelCase (``idList``) and so does the snapshot
file, so every model maps its snake_case fields through
``alias_generator=to_camel`` and accepts either spelling on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TrelloBaseModel(BaseModel):
    """Frozen model that ignores unknown keys and reads camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

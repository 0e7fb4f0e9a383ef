"""Pydantic base schema utilities for agent core models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all domain schemas.

    Configures common Pydantic behaviors:
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Prevent unknown fields from slipping into the model, ensuring strict validation.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )


class CamelSchema(BaseSchema):
    """
    Base model for payloads exchanged with callers and LLMs.

    Field names are snake_case in Python and camelCase on the wire
    (``project_id`` <-> ``projectId``). Both spellings are accepted on input;
    dump with ``by_alias=True`` to produce the wire shape. Unknown keys are
    dropped on input, so callers and models may send fields the schema does
    not declare.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        alias_generator=to_camel,
    )

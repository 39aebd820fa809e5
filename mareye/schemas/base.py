"""Shared schema configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model whose JSON keys are camelCase, as the web client sends them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

"""Provider schema strategies, selected by ``provider.schema_version``."""

from __future__ import annotations

from append_gateway.adapters.base import ProviderSchema
from append_gateway.adapters.data_array import DataArraySchema
from append_gateway.adapters.response_detail import ResponseDetailSchema
from append_gateway.config import ConfigurationError

__all__ = [
    "SCHEMAS",
    "DataArraySchema",
    "ProviderSchema",
    "ResponseDetailSchema",
    "get_schema",
]

SCHEMAS: dict[str, type[ProviderSchema]] = {
    DataArraySchema.name: DataArraySchema,
    ResponseDetailSchema.name: ResponseDetailSchema,
}


def get_schema(schema_version: str) -> ProviderSchema:
    """
    Instantiate the strategy for a configured schema version.

    Raises:
        ConfigurationError: If no strategy has that name
    """
    schema_type = SCHEMAS.get(schema_version)  # nosemgrep: no-dict-get-with-default
    if schema_type is None:
        raise ConfigurationError(
            f"Unknown provider schema version: {schema_version}. "
            f"Must be one of {sorted(SCHEMAS)}"
        )
    return schema_type()

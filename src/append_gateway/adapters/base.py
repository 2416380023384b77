"""
Provider schema contract.

A ProviderSchema owns everything that depends on the provider's wire format:
the outbound payload, where the record sits in the reply, and which reply
keys feed which ContactRecord fields. A provider schema change touches one
subclass and nothing else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from append_gateway.schemas import ContactRecord

if TYPE_CHECKING:
    from append_gateway.config import GatewaySecrets

_FLAG_FIELDS = frozenset({"phone_dnc", "cell_dnc"})
_SCORE_FIELDS = frozenset({"score"})


def credential_fields(secrets: GatewaySecrets) -> dict[str, str]:
    """Provider authentication fields, including only the ones configured."""
    fields: dict[str, str] = {}
    if secrets.provider_username is not None:
        fields["Username"] = secrets.provider_username
    if secrets.provider_password is not None:
        fields["Password"] = secrets.provider_password
    if secrets.provider_api_key is not None:
        fields["ApiKey"] = secrets.provider_api_key
    return fields


def as_text(value: Any) -> str | None:
    """Render a scalar as text; blanks and containers become None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text if text else None


def as_flag(value: Any) -> bool | str | None:
    """Keep provider do-not-call flags as sent (bool or code like "Y")."""
    if isinstance(value, bool):
        return value
    return as_text(value)


def as_score(value: Any) -> float | str | None:
    """Numeric scores become floats; anything else is passed through as text."""
    if isinstance(value, bool):
        return as_text(value)
    if isinstance(value, (int, float)):
        return float(value)
    return as_text(value)


class ProviderSchema(ABC):
    """
    Base class for provider payload strategies.

    Subclasses declare ``name`` and ``field_map`` (ContactRecord attribute ->
    provider record key) and implement payload building and record extraction.
    """

    name: ClassVar[str]
    field_map: ClassVar[dict[str, str]]

    @abstractmethod
    def build_payload(
        self,
        ip_address: str,
        secrets: GatewaySecrets,
        append_type: int,
    ) -> dict[str, Any]:
        """Build the outbound request body for one address."""

    @abstractmethod
    def extract_record(self, raw: Any) -> dict[str, Any] | None:
        """Return the first record in a provider reply, or None if there is none."""

    def summarize(self, raw: Any) -> dict[str, object]:
        """Reply metadata worth reporting when no record is usable."""
        if not isinstance(raw, dict):
            return {}
        summary: dict[str, object] = {}
        if "Count" in raw:
            summary["count"] = raw["Count"]
        if "ProcessedTime" in raw:
            summary["processedTime"] = raw["ProcessedTime"]
        return summary

    def map_record(self, record: dict[str, Any]) -> ContactRecord:
        """Map one provider record onto ContactRecord. Unknown keys are dropped."""
        values: dict[str, Any] = {}
        for attribute, provider_key in self.field_map.items():
            raw_value = record.get(provider_key)
            if attribute in _FLAG_FIELDS:
                values[attribute] = as_flag(raw_value)
            elif attribute in _SCORE_FIELDS:
                values[attribute] = as_score(raw_value)
            else:
                values[attribute] = as_text(raw_value)
        return ContactRecord(**values)

    def map_provider_response(self, raw: Any) -> ContactRecord | None:
        """
        Turn a raw provider reply into a ContactRecord.

        Returns None when the reply has no record, or when the record carries
        only location data and no name, email, or phone.
        """
        record = self.extract_record(raw)
        if record is None:
            return None
        contact = self.map_record(record)
        if not contact.has_identity():
            return None
        return contact

"""
Flat ``Data`` array schema.

Request::

    {"Username": ..., "Password": ..., "ApiKey": ..., "AppendType": 4,
     "Data": [{"IP": "203.0.113.7"}]}

Reply: ``{"Data": [{...record...}], "Count": 1, "ProcessedTime": ...}`` or a
bare top-level array of records.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from append_gateway.adapters.base import ProviderSchema, credential_fields

if TYPE_CHECKING:
    from append_gateway.config import GatewaySecrets


class DataArraySchema(ProviderSchema):
    """Provider payloads keyed by ``Data`` with ``IP`` entries."""

    name = "data_array"
    field_map = {
        "first_name": "FirstName",
        "last_name": "LastName",
        "email": "Email",
        "phone": "Phone",
        "cell": "Cell",
        "address": "Address",
        "city": "City",
        "state": "State",
        "zip_code": "ZipCode",
        "country": "Country",
        "phone_dnc": "Phone_DNC",
        "cell_dnc": "Cell_DNC",
        "isp": "ISP",
        "organization": "Organization",
        "score": "Score",
        "ip_address": "IP",
        "ip_city": "IP_City",
        "ip_state": "IP_State",
        "ip_country": "IP_Country",
    }

    def build_payload(
        self,
        ip_address: str,
        secrets: GatewaySecrets,
        append_type: int,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = credential_fields(secrets)
        payload["AppendType"] = append_type
        payload["Data"] = [{"IP": ip_address}]
        return payload

    def extract_record(self, raw: Any) -> dict[str, Any] | None:
        if isinstance(raw, dict):
            records = raw.get("Data")  # nosemgrep: no-dict-get-with-default
        else:
            records = raw

        if not isinstance(records, list) or not records:
            return None

        first = records[0]
        if not isinstance(first, dict):
            return None
        return first

"""
Nested ``ResponseDetail`` schema.

Request::

    {"ApiKey": ..., "AppendType": 4, "Records": [{"IPAddress": "203.0.113.7"}]}

Reply: ``{"ResponseDetail": {"Data": [{...record...}]}, ...}``. Records in
this shape spell a few fields differently (``Zip``, ``PhoneDNC``, ``Address1``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from append_gateway.adapters.base import ProviderSchema, credential_fields

if TYPE_CHECKING:
    from append_gateway.config import GatewaySecrets


class ResponseDetailSchema(ProviderSchema):
    """Provider payloads keyed by ``Records`` with replies under ``ResponseDetail.Data``."""

    name = "response_detail"
    field_map = {
        "first_name": "FirstName",
        "last_name": "LastName",
        "email": "Email",
        "phone": "Phone",
        "cell": "Cell",
        "address": "Address1",
        "city": "City",
        "state": "State",
        "zip_code": "Zip",
        "country": "Country",
        "phone_dnc": "PhoneDNC",
        "cell_dnc": "CellDNC",
        "isp": "ISP",
        "organization": "Organization",
        "score": "MatchScore",
        "ip_address": "IPAddress",
        "ip_city": "IPCity",
        "ip_state": "IPState",
        "ip_country": "IPCountry",
    }

    def build_payload(
        self,
        ip_address: str,
        secrets: GatewaySecrets,
        append_type: int,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = credential_fields(secrets)
        payload["AppendType"] = append_type
        payload["Records"] = [{"IPAddress": ip_address}]
        return payload

    def extract_record(self, raw: Any) -> dict[str, Any] | None:
        if not isinstance(raw, dict):
            return None

        detail = raw.get("ResponseDetail")  # nosemgrep: no-dict-get-with-default
        if not isinstance(detail, dict):
            return None

        records = detail.get("Data")  # nosemgrep: no-dict-get-with-default
        if not isinstance(records, list) or not records:
            return None

        first = records[0]
        if not isinstance(first, dict):
            return None
        return first

    def summarize(self, raw: Any) -> dict[str, object]:
        summary = super().summarize(raw)
        if isinstance(raw, dict):
            detail = raw.get("ResponseDetail")  # nosemgrep: no-dict-get-with-default
            if isinstance(detail, dict) and "Count" in detail:
                summary["count"] = detail["Count"]
        return summary

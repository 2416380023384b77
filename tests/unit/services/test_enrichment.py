"""Tests for the enrichment gateway service."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from append_gateway.adapters import DataArraySchema
from append_gateway.config import GatewaySecrets
from append_gateway.core.exceptions import (
    GatewayConfigurationError,
    InvalidInputError,
    NotFoundError,
    UpstreamError,
    UpstreamUnavailableError,
)
from append_gateway.services import EnrichmentGateway
from tests.factories import (
    PROVIDER_URL,
    create_data_array_reply,
    create_location_only_record,
    create_person_record,
)


@pytest.fixture
def provider_client() -> MagicMock:
    """Mock provider client returning one person record per call."""
    client = MagicMock()
    client.url = PROVIDER_URL
    client.append = AsyncMock(
        return_value=create_data_array_reply([create_person_record()]),
    )
    return client


@pytest.fixture
def secrets() -> GatewaySecrets:
    return GatewaySecrets(
        provider_api_key="provider-key",
        provider_username="provider-user",
        provider_password="provider-pass",
        proxy_api_key="inbound",
    )


@pytest.fixture
def gateway(provider_client: MagicMock, secrets: GatewaySecrets) -> EnrichmentGateway:
    return EnrichmentGateway(
        client=provider_client,
        schema=DataArraySchema(),
        secrets=secrets,
        append_type=4,
        max_batch_size=3,
    )


@pytest.mark.unit
class TestLookup:
    """Tests for EnrichmentGateway.lookup."""

    async def test_returns_contact(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        contact = await gateway.lookup(["203.0.113.7"])

        assert contact.email == "jane.doe@example.com"
        provider_client.append.assert_awaited_once_with(
            {
                "Username": "provider-user",
                "Password": "provider-pass",
                "ApiKey": "provider-key",
                "AppendType": 4,
                "Data": [{"IP": "203.0.113.7"}],
            }
        )

    async def test_only_first_address_is_looked_up(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        await gateway.lookup(["203.0.113.7", "198.51.100.2"])

        assert provider_client.append.await_count == 1
        payload = provider_client.append.await_args.args[0]
        assert payload["Data"] == [{"IP": "203.0.113.7"}]

    async def test_address_is_trimmed(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        await gateway.lookup(["  203.0.113.7 "])

        payload = provider_client.append.await_args.args[0]
        assert payload["Data"] == [{"IP": "203.0.113.7"}]

    @pytest.mark.parametrize("addresses", [[], [""], ["   "]])
    async def test_invalid_input_makes_no_call(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
        addresses: list[str],
    ) -> None:
        with pytest.raises(InvalidInputError):
            await gateway.lookup(addresses)

        provider_client.append.assert_not_called()

    async def test_invalid_input_checked_before_configuration(
        self,
        provider_client: MagicMock,
    ) -> None:
        """A bad request is reported as such even on an unconfigured server."""
        unconfigured = EnrichmentGateway(
            client=provider_client,
            schema=DataArraySchema(),
            secrets=GatewaySecrets(),
            append_type=4,
            max_batch_size=3,
        )

        with pytest.raises(InvalidInputError):
            await unconfigured.lookup([])

    async def test_missing_credentials_makes_no_call(
        self,
        provider_client: MagicMock,
    ) -> None:
        unconfigured = EnrichmentGateway(
            client=provider_client,
            schema=DataArraySchema(),
            secrets=GatewaySecrets(provider_username="user-without-password"),
            append_type=4,
            max_batch_size=3,
        )

        with pytest.raises(GatewayConfigurationError) as exc_info:
            await unconfigured.lookup(["203.0.113.7"])

        assert exc_info.value.details["providerPassword"] is False
        provider_client.append.assert_not_called()

    async def test_username_and_password_are_sufficient(
        self,
        provider_client: MagicMock,
    ) -> None:
        gateway = EnrichmentGateway(
            client=provider_client,
            schema=DataArraySchema(),
            secrets=GatewaySecrets(provider_username="u", provider_password="p"),
            append_type=4,
            max_batch_size=3,
        )

        await gateway.lookup(["203.0.113.7"])

        payload = provider_client.append.await_args.args[0]
        assert payload["Username"] == "u"
        assert "ApiKey" not in payload

    async def test_missing_endpoint_makes_no_call(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.url = ""

        with pytest.raises(GatewayConfigurationError):
            await gateway.lookup(["203.0.113.7"])

        provider_client.append.assert_not_called()

    async def test_location_only_record_is_not_found(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.return_value = create_data_array_reply(
            [create_location_only_record()]
        )

        with pytest.raises(NotFoundError) as exc_info:
            await gateway.lookup(["203.0.113.7"])

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "No data available for this IP"
        assert exc_info.value.details["count"] == 1

    async def test_empty_reply_is_not_found(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.return_value = create_data_array_reply([])

        with pytest.raises(NotFoundError):
            await gateway.lookup(["203.0.113.7"])

    async def test_upstream_errors_propagate(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.side_effect = UpstreamUnavailableError("down")

        with pytest.raises(UpstreamUnavailableError):
            await gateway.lookup(["203.0.113.7"])

    async def test_repeated_lookups_are_consistent(
        self,
        gateway: EnrichmentGateway,
    ) -> None:
        first = await gateway.lookup(["203.0.113.7"])
        second = await gateway.lookup(["203.0.113.7"])

        assert first == second


@pytest.mark.unit
class TestLookupBatch:
    """Tests for EnrichmentGateway.lookup_batch."""

    async def test_one_call_per_address_in_order(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.side_effect = [
            create_data_array_reply([create_person_record(ip_address="203.0.113.7")]),
            create_data_array_reply([]),
        ]

        results = await gateway.lookup_batch(["203.0.113.7", "198.51.100.2"])

        assert [item.ip_address for item in results] == ["203.0.113.7", "198.51.100.2"]
        assert results[0].status == "found"
        assert results[0].record is not None
        assert results[1].status == "not_found"
        assert results[1].message == "No data available for this IP"
        assert provider_client.append.await_count == 2

    async def test_oversized_batch_rejected(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            await gateway.lookup_batch(["192.0.2.1", "192.0.2.2", "192.0.2.3", "192.0.2.4"])

        assert exc_info.value.details == {"submitted": 4, "limit": 3}
        provider_client.append.assert_not_called()

    async def test_blank_entry_rejected_with_position(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            await gateway.lookup_batch(["192.0.2.1", " "])

        assert exc_info.value.details == {"position": 1}
        provider_client.append.assert_not_called()

    async def test_upstream_error_aborts_batch(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.side_effect = [
            create_data_array_reply([create_person_record()]),
            UpstreamError("upstream_error", "provider returned HTTP 500", 500, None),
        ]

        with pytest.raises(UpstreamError):
            await gateway.lookup_batch(["192.0.2.1", "192.0.2.2", "192.0.2.3"])

        assert provider_client.append.await_count == 2


@pytest.mark.unit
class TestProbeAndForward:
    """Tests for diagnostics pass-through operations."""

    async def test_probe_returns_raw_reply(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        provider_client.append.return_value = {"Data": [], "Count": 0}

        result = await gateway.probe("8.8.8.8")

        assert result == {"Data": [], "Count": 0}
        payload = provider_client.append.await_args.args[0]
        assert payload["Data"] == [{"IP": "8.8.8.8"}]

    async def test_forward_overwrites_caller_credentials(
        self,
        gateway: EnrichmentGateway,
        provider_client: MagicMock,
    ) -> None:
        await gateway.forward(
            {
                "Username": "caller",
                "Password": "caller-pass",
                "ApiKey": "caller-key",
                "AppendType": 1,
                "Data": [{"IP": "192.0.2.9"}],
            }
        )

        payload = provider_client.append.await_args.args[0]
        assert payload == {
            "AppendType": 1,
            "Data": [{"IP": "192.0.2.9"}],
            "Username": "provider-user",
            "Password": "provider-pass",
            "ApiKey": "provider-key",
        }

    async def test_forward_without_credentials_makes_no_call(
        self,
        provider_client: MagicMock,
    ) -> None:
        gateway = EnrichmentGateway(
            client=provider_client,
            schema=DataArraySchema(),
            secrets=GatewaySecrets(),
            append_type=4,
            max_batch_size=3,
        )

        with pytest.raises(GatewayConfigurationError):
            await gateway.forward({"Data": []})

        provider_client.append.assert_not_called()

"""
Enrichment gateway.

Validates lookups, builds the provider request through the configured
schema, makes exactly one provider call per address, and maps the reply to a
ContactRecord. Credentials and provider settings are bound at construction;
nothing is read from the environment here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from append_gateway.adapters.base import credential_fields
from append_gateway.core.exceptions import (
    GatewayConfigurationError,
    InvalidInputError,
    NotFoundError,
)
from append_gateway.logging import get_logger
from append_gateway.schemas import BatchItem, ContactRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from append_gateway.adapters.base import ProviderSchema
    from append_gateway.clients.provider import ProviderClient
    from append_gateway.config import GatewaySecrets

NO_DATA_MESSAGE = "No data available for this IP"

_CREDENTIAL_FIELDS = frozenset({"Username", "Password", "ApiKey"})


class EnrichmentGateway:
    """
    Single entry point for reverse IP append lookups.

    Attributes:
        client: Provider HTTP client
        schema: Provider payload strategy
        append_type: Provider append-mode selector
        max_batch_size: Largest accepted batch
    """

    def __init__(
        self,
        client: ProviderClient,
        schema: ProviderSchema,
        secrets: GatewaySecrets,
        append_type: int,
        max_batch_size: int,
    ) -> None:
        self.client = client
        self.schema = schema
        self.append_type = append_type
        self.max_batch_size = max_batch_size
        self._secrets = secrets

    def ensure_configured(self) -> None:
        """
        Fail before any outbound call when the provider cannot be used.

        Raises:
            GatewayConfigurationError: Credentials or endpoint missing
        """
        if not self.client.url:
            raise GatewayConfigurationError("Provider endpoint URL is not configured")
        if not self._secrets.has_provider_credentials:
            raise GatewayConfigurationError(
                "Provider credentials are not configured",
                details=self._secrets.presence_flags(),
            )

    @staticmethod
    def _clean_address(value: object, position: int) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError(
                "IP address is required",
                details={"position": position},
            )
        return value.strip()

    def validate_ip_addresses(self, ip_addresses: Sequence[str]) -> str:
        """
        Check a single-lookup request and return the address that will be used.

        Only the first address is looked up.

        Raises:
            InvalidInputError: Empty sequence or blank first address
        """
        if not ip_addresses:
            raise InvalidInputError("ipAddresses must be a non-empty list of IP addresses")
        return self._clean_address(ip_addresses[0], 0)

    def validate_batch(self, ip_addresses: Sequence[str]) -> list[str]:
        """
        Check a batch request and return the cleaned addresses in order.

        Raises:
            InvalidInputError: Empty, oversized, or containing a blank address
        """
        if not ip_addresses:
            raise InvalidInputError("ipAddresses must be a non-empty list of IP addresses")
        if len(ip_addresses) > self.max_batch_size:
            raise InvalidInputError(
                f"At most {self.max_batch_size} IP addresses may be submitted per batch",
                details={"submitted": len(ip_addresses), "limit": self.max_batch_size},
            )
        return [self._clean_address(value, index) for index, value in enumerate(ip_addresses)]

    async def _fetch(self, ip_address: str) -> Any:
        payload = self.schema.build_payload(ip_address, self._secrets, self.append_type)
        return await self.client.append(payload)

    async def lookup_one(self, ip_address: str) -> ContactRecord:
        """
        Enrich one already-validated address.

        Raises:
            NotFoundError: No record, or a record without personal fields
            UpstreamError: Provider error status or unreadable reply
            UpstreamUnavailableError: Provider unreachable or timed out
        """
        logger = get_logger()
        logger.info(
            "Looking up IP",
            extra={"ip_address": ip_address, "schema": self.schema.name},
        )

        raw = await self._fetch(ip_address)
        contact = self.schema.map_provider_response(raw)

        if contact is None:
            summary = self.schema.summarize(raw)
            logger.info(
                "No contact data for IP",
                extra={"ip_address": ip_address, **summary},
            )
            raise NotFoundError(NO_DATA_MESSAGE, details=summary)

        logger.info("Contact data found", extra={"ip_address": ip_address})
        return contact

    async def lookup(self, ip_addresses: Sequence[str]) -> ContactRecord:
        """
        Enrich the first address of a lookup request.

        Args:
            ip_addresses: Non-empty sequence of addresses; extras are ignored

        Returns:
            Contact record for the first address

        Raises:
            InvalidInputError: Empty sequence or blank first address
            GatewayConfigurationError: Provider credentials or endpoint missing
            NotFoundError: No usable record
            UpstreamError: Provider error status or unreadable reply
            UpstreamUnavailableError: Provider unreachable or timed out
        """
        ip_address = self.validate_ip_addresses(ip_addresses)
        self.ensure_configured()

        if len(ip_addresses) > 1:
            get_logger().warning(
                "Only the first IP address is looked up",
                extra={"ip_address": ip_address, "ignored": len(ip_addresses) - 1},
            )

        return await self.lookup_one(ip_address)

    async def lookup_batch(self, ip_addresses: Sequence[str]) -> list[BatchItem]:
        """
        Enrich every address, one provider call each, in order.

        A missing record is reported per address; any other error aborts
        the whole batch.
        """
        addresses = self.validate_batch(ip_addresses)
        self.ensure_configured()

        results: list[BatchItem] = []
        for ip_address in addresses:
            try:
                contact = await self.lookup_one(ip_address)
            except NotFoundError as e:
                results.append(
                    BatchItem(ip_address=ip_address, status="not_found", message=e.message)
                )
                continue
            results.append(BatchItem(ip_address=ip_address, status="found", record=contact))

        return results

    async def probe(self, ip_address: str) -> Any:
        """
        Run one provider call for connectivity diagnostics.

        Returns:
            The raw provider reply, unmapped
        """
        self.ensure_configured()
        get_logger().info("Probing provider", extra={"ip_address": ip_address})
        return await self._fetch(ip_address)

    async def forward(self, payload: dict[str, Any]) -> Any:
        """
        Pass a caller-built payload through to the provider.

        Server credentials replace any credential fields the caller sent.

        Returns:
            The raw provider reply
        """
        self.ensure_configured()
        outbound = {
            key: value for key, value in payload.items() if key not in _CREDENTIAL_FIELDS
        }
        get_logger().info(
            "Forwarding payload to provider",
            extra={"fields": sorted(outbound)},
        )
        outbound.update(credential_fields(self._secrets))
        return await self.client.append(outbound)

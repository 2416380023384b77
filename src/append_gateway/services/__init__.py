"""Domain services for the gateway."""

from append_gateway.services.enrichment import EnrichmentGateway

__all__ = ["EnrichmentGateway"]

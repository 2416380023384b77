"""Shared configuration, logging, and error primitives for HTTP services."""

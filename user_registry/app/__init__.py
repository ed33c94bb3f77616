"""Application package: runtime configuration, entities, services and HTTP API."""

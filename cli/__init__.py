"""Terminal client for the air quality aggregator service."""

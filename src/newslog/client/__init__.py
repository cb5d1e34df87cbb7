"""Client module - HTTP client, settings, vault and sync flows."""

"""Configuration layer: TOML discovery, settings, logging setup."""

"""Configuration package: file locations, TOML loading and derived settings."""

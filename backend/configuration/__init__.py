"""Configuration app - currencies and application-wide settings."""

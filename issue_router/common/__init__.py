"""Configuration, logging, metrics, errors and data models shared by all commands."""

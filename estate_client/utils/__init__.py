"""Configuration, logging and link helpers."""

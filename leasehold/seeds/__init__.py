"""Idempotent seed data for the package catalog."""

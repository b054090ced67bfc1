"""Environment configuration classes and settings."""

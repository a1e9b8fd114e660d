"""Configuration and declarative fixtures."""

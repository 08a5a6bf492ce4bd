"""Configuration and logging primitives."""

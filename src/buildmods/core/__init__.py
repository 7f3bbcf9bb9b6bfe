"""Core module container, host context and configuration."""

"""Core application components: configuration, persistence, security."""

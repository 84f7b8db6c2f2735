"""Model Studio API package."""

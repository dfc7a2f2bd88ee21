"""Infrastructure adapters: persistence, media access, wiring and CLI."""

"""QB Securiegnty backend: API surface, CLI and shared infrastructure."""

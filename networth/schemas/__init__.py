"""Request contracts for the HTTP adapter."""

"""bitperm management CLI."""

"""Simulateur d'investissement locatif : carte des loyers et géocodage."""

__version__ = "1.0.0"

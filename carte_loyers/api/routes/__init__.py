"""Routes de l'API : loyers, géocodage, simulation, santé et métriques."""

from . import geocodage, health, loyers, metrics, simulation

__all__ = ["geocodage", "health", "loyers", "metrics", "simulation"]

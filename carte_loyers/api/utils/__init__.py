"""Utilitaires : exceptions, logs, normalisation, géocodage."""

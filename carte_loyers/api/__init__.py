"""API FastAPI de la carte des loyers."""

"""Cache persistant du géocodage."""

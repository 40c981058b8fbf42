"""
Registry centralisé pour toutes les métriques Prometheus.
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Registry centralisé pour toutes les métriques
PROMETHEUS_REGISTRY = CollectorRegistry()

# Métriques HTTP
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total des requêtes HTTP par méthode et endpoint",
    ["method", "endpoint", "status_code"],
    registry=PROMETHEUS_REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "Durée des requêtes HTTP en secondes",
    ["method", "endpoint"],
    registry=PROMETHEUS_REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Appels sortants
FETCH_FAILURES_TOTAL = Counter(
    "upstream_fetch_failures_total",
    "Tentatives de requêtes sortantes en échec",
    ["reason"],
    registry=PROMETHEUS_REGISTRY,
)

DATASET_DOWNLOADS_TOTAL = Counter(
    "rent_dataset_downloads_total",
    "Téléchargements du CSV de la carte des loyers",
    registry=PROMETHEUS_REGISTRY,
)

# Index des loyers
INDEX_BUILD_DURATION = Histogram(
    "rent_index_build_duration_seconds",
    "Durée de construction de l'index des loyers",
    registry=PROMETHEUS_REGISTRY,
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

INDEX_SIZE = Gauge(
    "rent_index_entries",
    "Nombre d'entrées par table de l'index des loyers",
    ["table"],
    registry=PROMETHEUS_REGISTRY,
)

RENT_LOOKUPS_TOTAL = Counter(
    "rent_lookups_total",
    "Recherches de loyers par méthode et résultat",
    ["method", "result"],
    registry=PROMETHEUS_REGISTRY,
)

# Géocodage
GEOCODE_RESOLUTIONS_TOTAL = Counter(
    "geocode_resolutions_total",
    "Résolutions de code INSEE par source",
    ["source"],
    registry=PROMETHEUS_REGISTRY,
)

"""
Exceptions personnalisées de l'API Carte des loyers.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class CarteLoyersException(HTTPException):
    """Exception de base de l'application Carte des loyers."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class DownloadFailed(CarteLoyersException):
    """Échec d'un téléchargement après épuisement des tentatives."""

    def __init__(
        self,
        url: str,
        detail: str,
        error_code: str = "DOWNLOAD_FAILED",
        status_code: int = 503,
    ):
        super().__init__(
            status_code=status_code,
            detail=f"Téléchargement impossible ({url}): {detail}",
            error_code=error_code,
        )
        self.url = url


class TransportFailure(DownloadFailed):
    """Timeout, annulation ou erreur réseau."""

    def __init__(self, url: str, detail: str):
        super().__init__(url, detail, error_code="TRANSPORT_FAILURE")


class UpstreamStatusFailure(DownloadFailed):
    """Le service distant a répondu avec un statut HTTP non 2xx."""

    def __init__(self, url: str, upstream_status: int):
        super().__init__(
            url,
            f"HTTP {upstream_status}",
            error_code="UPSTREAM_STATUS",
            status_code=502,
        )
        self.upstream_status = upstream_status


class NoResourceFound(CarteLoyersException):
    """Le jeu de données ne contient aucune ressource CSV exploitable."""

    def __init__(self, dataset: str):
        super().__init__(
            status_code=503,
            detail=f"Aucune ressource CSV trouvée dans le dataset {dataset}",
            error_code="NO_RESOURCE_FOUND",
        )
        self.dataset = dataset


# Nom utilisé côté index : un dataset sans CSV est un dataset vide.
EmptyDataset = NoResourceFound


class MalformedDatasetError(CarteLoyersException):
    """Le CSV téléchargé ne peut pas être lu dans son ensemble."""

    def __init__(self, detail: str, error_code: str = "MALFORMED_DATASET"):
        super().__init__(
            status_code=502,
            detail=f"CSV de la carte des loyers illisible: {detail}",
            error_code=error_code,
        )


class MissingColumnsError(MalformedDatasetError):
    """Colonnes attendues absentes de l'en-tête du CSV."""

    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__(
            f"colonnes manquantes {', '.join(self.missing)}",
            error_code="MISSING_COLUMNS",
        )


class GeocodeLookupFailure(CarteLoyersException):
    """Erreur réseau ou de décodage lors du géocodage distant."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=503,
            detail=f"Géocodage indisponible: {detail}",
            error_code="GEOCODE_LOOKUP_FAILURE",
        )


class CacheCorrupt(ValueError):
    """Contenu du cache persistant illisible."""


class RentRecordNotFound(CarteLoyersException):
    """Aucun loyer connu pour la commune demandée."""

    def __init__(self, query: str):
        super().__init__(
            status_code=404,
            detail=f"Loyer introuvable pour '{query}'",
            error_code="RENT_NOT_FOUND",
        )


class ConfigurationError(CarteLoyersException):
    """Erreur de configuration."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=500,
            detail=f"Erreur de configuration: {detail}",
            error_code="CONFIGURATION_ERROR",
        )

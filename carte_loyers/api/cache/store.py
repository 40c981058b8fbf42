"""
Stockage clé/valeur du cache de géocodage (mémoire, fichier JSON ou Redis).
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import redis

from carte_loyers.api.config.settings import Settings, settings
from carte_loyers.api.utils.exceptions import CacheCorrupt, ConfigurationError

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Magasin de chaînes indexé par clé, rattaché à un espace de noms."""

    def __init__(self, namespace: Optional[str] = None):
        self.namespace = namespace or settings.GEOCODE_CACHE_NAMESPACE

    @abstractmethod
    def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    def ping(self) -> bool:
        return True


class InMemoryCacheStore(CacheStore):
    def __init__(self, namespace: Optional[str] = None):
        super().__init__(namespace)
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileCacheStore(CacheStore):
    """Fichier JSON local `{clé: chaîne}` réécrit en entier à chaque écriture."""

    def __init__(self, path: Path, namespace: Optional[str] = None):
        super().__init__(namespace)
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Fichier de cache illisible {self.path} : {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def ping(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Dossier de cache inaccessible : {e}")
            return False
        return True


class RedisCacheStore(CacheStore):
    def __init__(self, redis_url: str, namespace: Optional[str] = None):
        super().__init__(namespace)
        self.client = redis.Redis.from_url(redis_url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis inaccessible : {e}")
            return False


def create_cache_store(config: Settings = settings) -> CacheStore:
    backend = config.CACHE_BACKEND
    namespace = config.GEOCODE_CACHE_NAMESPACE
    if backend == "memory":
        return InMemoryCacheStore(namespace)
    if backend == "file":
        return JsonFileCacheStore(config.CACHE_FILE, namespace)
    if backend == "redis":
        return RedisCacheStore(config.REDIS_URL, namespace)
    raise ConfigurationError(f"backend de cache inconnu '{backend}'")


def decode_cache_blob(raw: Optional[str]) -> Dict[str, str]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise CacheCorrupt(str(e)) from e
    if not isinstance(data, dict):
        raise CacheCorrupt(f"objet JSON attendu, reçu {type(data).__name__}")
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


class GeocodeCache:
    """
    Cache `"<nom>|<code postal>" -> code INSEE` stocké comme un seul objet
    JSON sous l'espace de noms du magasin (lecture-modification-écriture).
    """

    def __init__(self, store: CacheStore):
        self.store = store

    @staticmethod
    def make_key(nom: str, code_postal: str) -> str:
        return f"{(nom or '').strip()}|{(code_postal or '').strip()}"

    def load(self) -> Dict[str, str]:
        try:
            return decode_cache_blob(self.store.get(self.store.namespace))
        except CacheCorrupt as e:
            logger.warning(f"Cache de géocodage corrompu, ignoré : {e}")
            return {}
        except redis.RedisError as e:
            logger.warning(f"Cache de géocodage indisponible : {e}")
            return {}

    def get(self, key: str) -> Optional[str]:
        return self.load().get(key)

    def put(self, key: str, code_insee: str) -> None:
        data = self.load()
        data[key] = code_insee
        try:
            self.store.set(
                self.store.namespace, json.dumps(data, ensure_ascii=False)
            )
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Écriture du cache de géocodage impossible : {e}")

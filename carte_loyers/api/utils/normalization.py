"""
Normalisation des noms de communes et conversion des cellules numériques.
"""

import math
import re
import unicodedata
from typing import Any, Optional

_SEPARATORS = re.compile(r"[-'’]")
_SPACES = re.compile(r"\s+")


def normalize_name(value: Any) -> str:
    """
    Forme canonique d'un nom de commune pour les comparaisons.

    "Saint-Étienne" -> "saint etienne", "L’Haÿ-les-Roses" -> "l hay les roses".
    """
    text = unicodedata.normalize("NFD", str(value or "").lower())
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = _SEPARATORS.sub(" ", text)
    return _SPACES.sub(" ", text).strip()


def to_number(value: Any) -> Optional[float]:
    """Nombre fini ou None (virgule décimale et espaces acceptés)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_label(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None

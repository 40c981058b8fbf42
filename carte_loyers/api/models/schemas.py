from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RentRecord(BaseModel):
    """Indicateurs de loyer d'une commune (carte des loyers)."""

    model_config = ConfigDict(frozen=True)

    code_insee: str
    commune: str
    loyer_m2: Optional[float] = None
    borne_basse: Optional[float] = None
    borne_haute: Optional[float] = None
    niveau_prediction: Optional[str] = None
    nb_observations: Optional[float] = None
    r2: Optional[float] = None
    loyer_m2_maison: Optional[float] = None
    loyer_m2_appartement: Optional[float] = None


class DatasetResource(BaseModel):
    """Ressource d'un dataset data.gouv.fr (métadonnées utiles)."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    last_modified: Optional[str] = None
    created_at: Optional[str] = None


class CommuneCandidate(BaseModel):
    """Commune renvoyée par geo.api.gouv.fr."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: str
    nom: str = ""
    codes_postaux: List[str] = Field(default_factory=list, alias="codesPostaux")


class RentEstimateResponse(BaseModel):
    code_insee: str
    commune: str
    type_bien: str
    surface: float
    loyer_m2: Optional[float] = None
    loyer_mensuel: Optional[int] = None
    borne_basse: Optional[float] = None
    borne_haute: Optional[float] = None
    niveau_prediction: Optional[str] = None
    r2: Optional[float] = None


class GeocodeResponse(BaseModel):
    nom: str
    code_postal: str
    code_insee: Optional[str] = None
    trouve: bool


class PretModel(BaseModel):
    montant: float = Field(0, ge=0, description="Capital emprunté en euros")
    taux_annuel: float = Field(0, ge=0, description="Taux annuel en %")
    duree_annees: float = Field(0, ge=0, description="Durée en années")


class SimulationRequest(BaseModel):
    revenu_brut_mensuel: float = Field(
        0, ge=0, description="Revenu locatif brut saisi (0 = loyer autorisé)"
    )
    loyer_mensuel_autorise: float = Field(
        0, ge=0, description="Loyer estimé depuis la carte des loyers"
    )
    charges_mensuelles: float = Field(0, ge=0)
    pret_banque: PretModel = Field(default_factory=PretModel)
    pret_sasu: PretModel = Field(default_factory=PretModel)
    coupon_phase1: float = Field(0, ge=0)
    coupon_phase2: float = Field(1000, ge=0)


class SimulationResponse(BaseModel):
    revenu_brut_mensuel: float
    mensualite_banque: int
    mensualite_sasu: int
    cash_flow_phase1: int
    cash_flow_phase2: int
    taux_occupation_seuil: Optional[float] = Field(
        None, description="Occupation minimale (%) pour un cash-flow phase 1 >= 0"
    )


TypeBien = Literal["appartement", "maison", "autre"]

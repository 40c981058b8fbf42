"""
Simulation de financement : mensualités (banque, SASU) et cash-flow
mensuel en phase 1 (deux prêts) puis en phase 2 (prêt bancaire soldé).
"""

from typing import Optional

from carte_loyers.api.models.schemas import (PretModel, SimulationRequest,
                                             SimulationResponse)
from carte_loyers.api.services.estimation_service import round_half_up


def pmt(monthly_rate: float, n_months: float, principal: float) -> float:
    """Annuité constante (formule PMT classique)."""
    if monthly_rate == 0:
        return principal / n_months
    return principal * monthly_rate / (1 - (1 + monthly_rate) ** -n_months)


def monthly_payment(pret: PretModel) -> int:
    n_months = pret.duree_annees * 12
    if pret.montant <= 0 or n_months <= 0:
        return 0
    return round_half_up(pmt(pret.taux_annuel / 100 / 12, n_months, pret.montant))


def break_even_occupancy(besoin: float, revenu: float) -> Optional[float]:
    """Taux d'occupation (%) au-delà duquel le cash-flow phase 1 est positif."""
    if revenu <= 0:
        return None
    occupation = min(1.0, max(0.0, besoin / revenu))
    return round(occupation * 100, 1)


def simulate(request: SimulationRequest) -> SimulationResponse:
    revenu = request.revenu_brut_mensuel or request.loyer_mensuel_autorise
    mensualite_banque = monthly_payment(request.pret_banque)
    mensualite_sasu = monthly_payment(request.pret_sasu)

    besoin_phase1 = (
        request.charges_mensuelles
        + mensualite_banque
        + mensualite_sasu
        + request.coupon_phase1
    )
    besoin_phase2 = (
        request.charges_mensuelles + mensualite_sasu + request.coupon_phase2
    )

    return SimulationResponse(
        revenu_brut_mensuel=revenu,
        mensualite_banque=mensualite_banque,
        mensualite_sasu=mensualite_sasu,
        cash_flow_phase1=round_half_up(revenu - besoin_phase1),
        cash_flow_phase2=round_half_up(revenu - besoin_phase2),
        taux_occupation_seuil=break_even_occupancy(besoin_phase1, revenu),
    )

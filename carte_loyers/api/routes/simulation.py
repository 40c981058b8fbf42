# carte_loyers/api/routes/simulation.py
from fastapi import APIRouter

from carte_loyers.api.models.schemas import SimulationRequest, SimulationResponse
from carte_loyers.api.services.simulation_service import simulate

router = APIRouter()


@router.post("/simulation", response_model=SimulationResponse, tags=["Simulation"])
async def create_simulation(body: SimulationRequest) -> SimulationResponse:
    return simulate(body)

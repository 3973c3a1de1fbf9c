# jrdriving/schemas/dashboard.py
from jrdriving.schemas.base import CamelModel
from jrdriving.schemas.driver_application import DriverApplicationOut
from jrdriving.schemas.mission import MissionOut
from jrdriving.schemas.quote import QuoteOut


class DashboardStats(CamelModel):
    total_missions: int
    active_missions: int
    total_drivers: int
    total_clients: int
    pending_quotes: int
    revenue: float
    punctuality_rate: int


class DashboardOut(CamelModel):
    stats: DashboardStats
    recent_missions: list[MissionOut]
    pending_quotes: list[QuoteOut]
    driver_applications: list[DriverApplicationOut]
    ai_insights: list[str]

from typing import Dict
from sqlmodel import SQLModel


class ProjectPortfolioStatsRead(SQLModel):
    totalProjects: int
    totalBudget: float
    avgProgress: float
    completedProjects: int
    inProgressProjects: int
    plannedProjects: int
    highRiskProjects: int
    totalRisks: int
    totalCapacityKw: float
    totalCapacityLabel: str
    projectTypes: Dict[str, int]
    counties: int
    avgProjectValue: float

from pydantic import BaseModel


class MonthlySummary(BaseModel):
    month: str  # YYYY-MM
    income: float
    expense: float
    balance: float


class SummaryResponse(BaseModel):
    income: float
    expense: float
    balance: float
    series: list[MonthlySummary]

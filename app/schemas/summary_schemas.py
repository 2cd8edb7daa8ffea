from pydantic import BaseModel


class ClientStats(BaseModel):
    active_projects: int
    completed_projects: int
    pending_orders: int
    total_spent: int

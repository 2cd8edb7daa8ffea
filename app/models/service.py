from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime


class Service(SQLModel, table=True):
    # slug ids, e.g. "landing-page"
    id: str = Field(primary_key=True)
    name: str
    description: str

    price: int
    original_price: Optional[int] = None
    duration: str

    spots_remaining: int = 0
    total_spots: int = 0

    # ordered list of {"name": str, "price": int}
    add_ons: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    industry: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    category: str = Field(default="launch", index=True)  # launch | growth | elite | custom
    recommended: bool = False
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

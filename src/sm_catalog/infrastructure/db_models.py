"""SQLAlchemy ORM model for the items table (persisted catalog snapshot)."""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.sm_common.database import Base


class ItemModel(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    min_price_non_tradable: Mapped[float | None] = mapped_column(Float, nullable=True)
    min_price_tradable: Mapped[float | None] = mapped_column(Float, nullable=True)

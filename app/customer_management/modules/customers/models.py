from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.customer_management.models import Base

NAME_MAX_LENGTH = 100
NIC_MAX_LENGTH = 20

# 64-bit ids; SQLite only autoincrements an INTEGER PRIMARY KEY.
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
ID_MAX = 2**63 - 1


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("nic_number", name="uq_customers_nic_number"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    nic_number: Mapped[str] = mapped_column(String(NIC_MAX_LENGTH), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    # Stamped by CustomerStore.save(); created_at never changes after insert.
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "nicNumber": self.nic_number,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"Customer(id={self.id!r}, name={self.name!r}, "
            f"nic_number={self.nic_number!r}, date_of_birth={self.date_of_birth!r})"
        )

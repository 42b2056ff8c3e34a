"""Shared SQLModel base and column helpers for domain entities"""

from sqlmodel import SQLModel, Column
from sqlalchemy import BigInteger, Integer, Numeric

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntegerId = BigInteger().with_variant(Integer(), "sqlite")


class BaseModel(SQLModel):
    """Base class for all persisted domain entities"""


def id_column() -> Column:
    return Column(BigIntegerId, primary_key=True, autoincrement=True)


def money_column(nullable: bool = False, default=0) -> Column:
    """Currency column, two decimal places"""
    return Column(Numeric(18, 2), nullable=nullable, default=default)


def quantity_column() -> Column:
    return Column(Numeric(18, 3), nullable=False)

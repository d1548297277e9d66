# app/infrastructure/database/base_model.py

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite só faz autoincremento em "INTEGER PRIMARY KEY"
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class BaseModel(DeclarativeBase):
    pass

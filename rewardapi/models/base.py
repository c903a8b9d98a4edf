from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


class CreatedAtMixin:
    """Creation timestamp for append-only rows"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Creation timestamp plus an update timestamp refreshed on every mutation"""

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class BaseModel(Base, TimestampMixin):
    """Mutable entities"""

    __abstract__ = True


class AppendOnlyModel(Base, CreatedAtMixin):
    """Rows that are written once and never updated"""

    __abstract__ = True

"""SQLAlchemy models for farmledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Farm(Base):
    """Farm (tenant) model."""

    __tablename__ = "farms"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="farm", cascade="all, delete-orphan")
    assumptions = relationship("Assumption", back_populates="farm", cascade="all, delete-orphan")
    gl_accounts = relationship("GlAccount", back_populates="farm", cascade="all, delete-orphan")


class Category(Base):
    """Farm category model with hierarchical structure."""

    __tablename__ = "farm_categories"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    code = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("farm_categories.id"), nullable=True)
    path = Column(String, nullable=False)
    level = Column(Integer, default=0, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    category_type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("farm_id", "code", name="uq_farm_category_code"),)

    # Relationships
    farm = relationship("Farm", back_populates="categories")
    parent = relationship("Category", remote_side=[id], backref="children")
    gl_accounts = relationship("GlAccount", back_populates="category")


class Assumption(Base):
    """Planning assumptions for one farm and fiscal year."""

    __tablename__ = "assumptions"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    total_acres = Column(Float, nullable=False)
    crops_json = Column(JSON, default=list, nullable=False)
    start_month = Column(String(3), default="Nov", nullable=False)
    is_frozen = Column(Boolean, default=False, nullable=False)
    frozen_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("farm_id", "fiscal_year", name="uq_assumption_farm_year"),)

    # Relationships
    farm = relationship("Farm", back_populates="assumptions")


class MonthlyData(Base):
    """Category values for one farm, fiscal year, month and representation."""

    __tablename__ = "monthly_data"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    type = Column(String, nullable=False)
    data_json = Column(JSON, default=dict, nullable=False)
    is_actual = Column(Boolean, default=False, nullable=False)
    comments_json = Column(JSON, default=dict, nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("farm_id", "fiscal_year", "month", "type", name="uq_monthly_data_key"),
    )


class MonthlyDataFrozen(Base):
    """Frozen budget copy of a MonthlyData row."""

    __tablename__ = "monthly_data_frozen"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    type = Column(String, nullable=False)
    data_json = Column(JSON, default=dict, nullable=False)
    is_actual = Column(Boolean, default=False, nullable=False)
    comments_json = Column(JSON, default=dict, nullable=False)

    __table_args__ = (
        UniqueConstraint("farm_id", "fiscal_year", "month", "type", name="uq_monthly_data_frozen_key"),
    )


class GlAccount(Base):
    """General ledger account model."""

    __tablename__ = "gl_accounts"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    account_number = Column(String, nullable=False)
    account_name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("farm_categories.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("farm_id", "account_number", name="uq_gl_account_number"),
    )

    # Relationships
    farm = relationship("Farm", back_populates="gl_accounts")
    category = relationship("Category", back_populates="gl_accounts")
    actual_details = relationship(
        "GlActualDetail", back_populates="gl_account", cascade="all, delete-orphan"
    )


class GlActualDetail(Base):
    """Actual amount for one GL account in one fiscal month."""

    __tablename__ = "gl_actual_details"

    id = Column(Integer, primary_key=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    gl_account_id = Column(Integer, ForeignKey("gl_accounts.id"), nullable=False)
    amount = Column(Float, default=0.0, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "farm_id", "fiscal_year", "month", "gl_account_id", name="uq_gl_actual_detail_key"
        ),
    )

    # Relationships
    gl_account = relationship("GlAccount", back_populates="actual_details")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

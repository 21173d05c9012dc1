"""SQLAlchemy models for the catalog table.

One row per catalog item, keyed by an identity column with a unique
secondary index on the public identifier. Categories and tags are
PostgreSQL text arrays queried with containment.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Float, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from catalogsvc.domain.entities import CatalogItem
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus
from catalogsvc.infrastructure.database import Base


class CatalogItemRecord(Base):
    """Persistent row for a catalog item.

    Attributes:
        id: Internal sequential key.
        public_id: Externally stable identifier (unique).
        title: Item title.
        description: Item description.
        industry_id: Industry identifier.
        industry_name: Industry name.
        categories: Category names.
        tags: Tag names.
        price: Decimal price.
        merchant_id: Merchant identifier.
        rating: Rating (0.0-5.0).
        compliance_status: Canonical compliance status name.
        availability_status: Canonical availability status name.
        created_on: Creation timestamp.
        updated_on: Last update timestamp.
    """

    __tablename__ = "catalog"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    public_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), nullable=False, unique=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    industry_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    industry_name: Mapped[str] = mapped_column(String(255), nullable=False)
    categories: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    merchant_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    compliance_status: Mapped[str] = mapped_column(String(32), nullable=False)
    availability_status: Mapped[str] = mapped_column(String(32), nullable=False)
    created_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_on: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CatalogItemRecord(id={self.id}, public_id={self.public_id}, title={self.title[:30]})>"

    @classmethod
    def from_entity(cls, item: CatalogItem) -> "CatalogItemRecord":
        """Build a new row from an entity.

        Args:
            item: Entity to persist.

        Returns:
            Unsaved row.
        """
        record = cls(id=item.id, public_id=item.public_id)
        record.apply_entity(item)
        return record

    def apply_entity(self, item: CatalogItem) -> None:
        """Overwrite every content column from an entity.

        Args:
            item: Entity carrying the new state.
        """
        self.title = item.title
        self.description = item.description
        self.industry_id = item.industry_id
        self.industry_name = item.industry_name
        self.categories = list(item.categories)
        self.tags = list(item.tags)
        self.price = item.price
        self.merchant_id = item.merchant_id
        self.rating = item.rating
        self.compliance_status = item.compliance_status.name
        self.availability_status = item.availability_status.name
        self.created_on = item.created_on
        self.updated_on = item.updated_on

    def to_entity(self) -> CatalogItem:
        """Convert to a domain entity.

        Returns:
            CatalogItem carrying the internal key.
        """
        return CatalogItem(
            id=self.id,
            public_id=self.public_id,
            title=self.title,
            description=self.description,
            industry_id=self.industry_id,
            industry_name=self.industry_name,
            categories=tuple(self.categories or ()),
            tags=tuple(self.tags or ()),
            price=self.price,
            merchant_id=self.merchant_id,
            rating=self.rating,
            compliance_status=ComplianceStatus[self.compliance_status],
            availability_status=AvailabilityStatus[self.availability_status],
            created_on=self.created_on,
            updated_on=self.updated_on,
        )

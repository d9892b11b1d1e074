from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from configurator_api.db.base import ActiveFlagMixin, Base, CodedEntityMixin, IntPkMixin


class Category(IntPkMixin, CodedEntityMixin, ActiveFlagMixin, Base):
    """Group of mutually exclusive options (e.g. Columns Size, IP Rating)."""
    __tablename__ = "categories"

    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")


class Option(IntPkMixin, CodedEntityMixin, ActiveFlagMixin, Base):
    """Selectable choice within a category (e.g. 700x1000, IP54)."""
    __tablename__ = "options"

    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")


class Module(IntPkMixin, CodedEntityMixin, ActiveFlagMixin, Base):
    """Buildable assembly unit activated by options."""
    __tablename__ = "modules"

    # Opaque to the BOM engine; consumed by CAD tooling only.
    master_assembly_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Part(IntPkMixin, CodedEntityMixin, ActiveFlagMixin, Base):
    """Procurable leaf component with price and supplier metadata."""
    __tablename__ = "parts"
    __table_args__ = (CheckConstraint("unit_price >= 0", name="unit_price_non_negative"),)

    part_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    supplier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit: Mapped[str] = mapped_column(Text, nullable=False, default="pcs", server_default="pcs")


class OptionModule(IntPkMixin, Base):
    """Link: selecting an option activates `quantity` instances of a module."""
    __tablename__ = "option_modules"
    __table_args__ = (CheckConstraint("quantity > 0", name="quantity_positive"),)

    option_id: Mapped[int] = mapped_column(Integer, ForeignKey("options.id", ondelete="CASCADE"), nullable=False, index=True)
    module_id: Mapped[int] = mapped_column(Integer, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")


class ModulePart(IntPkMixin, Base):
    """Link: one module instance requires `quantity` of a part."""
    __tablename__ = "module_parts"
    __table_args__ = (CheckConstraint("quantity > 0", name="quantity_positive"),)

    module_id: Mapped[int] = mapped_column(Integer, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    part_id: Mapped[int] = mapped_column(Integer, ForeignKey("parts.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

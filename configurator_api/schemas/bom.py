from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class ModuleActivation(BaseModel):
    """Net number of instances of a module required by the selected options."""
    module_id: int = Field(..., description="Module ID")
    quantity: int = Field(..., ge=0, description="Accumulated activation quantity")


class ActivatedModule(ModuleActivation):
    """A module activation whose module record was found in the catalog."""
    name: str = Field(..., description="Module display name")

    @property
    def label(self) -> str:
        return f"{self.name} (x{self.quantity})"


class ConsolidatedPart(BaseModel):
    """Per-part total across all activated modules, with provenance."""
    part_id: int = Field(..., description="Part ID")
    quantity: int = Field(..., ge=0, description="Consolidated quantity")
    source_modules: List[str] = Field(default_factory=list, description="Contributing module names")


class BomLineItem(BaseModel):
    """One consolidated, priced BOM line."""
    part_id: int = Field(..., description="Part ID")
    part_code: str = Field(..., description="Part business code")
    part_name: str = Field(..., description="Part name")
    part_number: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    total_quantity: int = Field(..., ge=0, description="Consolidated quantity")
    unit: str = Field("pcs")
    unit_price: Decimal = Field(..., ge=0)
    supplier: Optional[str] = Field(None)
    source_modules: List[str] = Field(default_factory=list, description="Modules this part comes from")

    @computed_field  # type: ignore[misc]
    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.total_quantity


class BomResult(BaseModel):
    """Complete Bill of Materials generated from a set of selected options."""
    configuration_name: str = Field(..., description="Label of the configuration")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    selected_options: List[str] = Field(default_factory=list, description="'{name} ({code})' labels")
    activated_modules: List[str] = Field(default_factory=list, description="'{name} (x{qty})' labels")
    line_items: List[BomLineItem] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def total_cost(self) -> Decimal:
        return sum((item.total_price for item in self.line_items), Decimal("0"))

    @computed_field  # type: ignore[misc]
    @property
    def total_items(self) -> int:
        return sum(item.total_quantity for item in self.line_items)

    @computed_field  # type: ignore[misc]
    @property
    def unique_part_count(self) -> int:
        return len(self.line_items)


class BomGenerateRequest(BaseModel):
    """Request payload for BOM generation and export."""
    configuration_name: str = Field("Configuration", min_length=1, description="Free-text label")
    option_ids: List[int] = Field(default_factory=list, description="Selected option ids")

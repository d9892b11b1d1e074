from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryRead(BaseModel):
    """Category read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Category ID")
    code: str = Field(..., description="Business code")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None)
    display_order: int = Field(0, description="Ordering within the configurator")
    is_active: bool = Field(True)


class OptionRead(BaseModel):
    """Option read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Option ID")
    code: str = Field(..., description="Business code")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None)
    category_id: int = Field(..., description="Owning category")
    display_order: int = Field(0)
    is_active: bool = Field(True)
    is_default: bool = Field(False, description="Preselected option of its category")


class CategoryWithOptions(CategoryRead):
    """Category together with its active options, as shown by the configurator."""
    options: List[OptionRead] = Field(default_factory=list)


class ModuleRead(BaseModel):
    """Module read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Module ID")
    code: str = Field(..., description="Business code")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None)
    master_assembly_path: Optional[str] = Field(None, description="CAD master assembly file")
    is_active: bool = Field(True)


class PartRead(BaseModel):
    """Part read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Part ID")
    code: str = Field(..., description="Business code")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None)
    part_number: Optional[str] = Field(None, description="Supplier or internal part number")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit")
    supplier: Optional[str] = Field(None)
    unit: str = Field("pcs", description="Measurement unit")
    is_active: bool = Field(True)


class PartCreate(BaseModel):
    """Create part payload."""
    code: str = Field(..., min_length=1, description="Business code (unique)")
    name: str = Field(..., min_length=1, description="Display name")
    description: Optional[str] = Field(None)
    part_number: Optional[str] = Field(None)
    unit_price: Decimal = Field(Decimal("0.00"), ge=0, decimal_places=2)
    supplier: Optional[str] = Field(None)
    unit: str = Field("pcs", min_length=1)
    is_active: bool = Field(True)


class PartUpdate(BaseModel):
    """Partial part update; omitted fields keep their stored value."""
    code: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None)
    part_number: Optional[str] = Field(None)
    unit_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    supplier: Optional[str] = Field(None)
    unit: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = Field(None)


class ModuleCreate(BaseModel):
    """Create module payload."""
    code: str = Field(..., min_length=1, description="Business code (unique)")
    name: str = Field(..., min_length=1, description="Display name")
    description: Optional[str] = Field(None)
    master_assembly_path: Optional[str] = Field(None)
    is_active: bool = Field(True)


class ModuleUpdate(BaseModel):
    """Partial module update."""
    code: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None)
    master_assembly_path: Optional[str] = Field(None)
    is_active: Optional[bool] = Field(None)


class OptionModuleCreate(BaseModel):
    """Link an option to a module it activates."""
    option_id: int = Field(..., ge=1)
    module_id: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1, description="Module instances activated by the option")


class OptionModuleRead(OptionModuleCreate):
    """Option -> module link read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Link ID")


class ModulePartCreate(BaseModel):
    """Add a part to a module's bill of materials."""
    module_id: int = Field(..., ge=1)
    part_id: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1, description="Parts required per module instance")


class ModulePartRead(ModulePartCreate):
    """Module -> part link read model."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Link ID")

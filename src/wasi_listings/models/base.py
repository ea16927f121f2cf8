# src/wasi_listings/models/base.py

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum

from ..config.constants import MAX_IMAGES, MAX_DESCRIPTION_LENGTH


class PropertyType(str, Enum):
    CASA = "casa"
    APARTAMENTO = "apartamento"
    TOWNHOUSE = "townhouse"
    TERRENO = "terreno"


def snap_to_half(value: float) -> float:
    """Round a room count to the nearest half step (2.3 -> 2.5, 2.2 -> 2.0)."""
    return int(value * 2 + 0.5) / 2


def unique_in_order(values: List[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class ScrapedProperty(BaseModel):
    """Structured record produced by one scrape of a listing page."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    # Required fields
    title: str = Field(..., min_length=1)
    price: int = Field(0, ge=0)
    property_type: PropertyType = Field(default=PropertyType.APARTAMENTO)
    bedrooms: int = Field(0, ge=0)
    bathrooms: float = Field(0, ge=0)
    parking: int = Field(0, ge=0)
    location: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)

    address: Optional[str] = None
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    images: List[str] = Field(default_factory=list, max_length=MAX_IMAGES)

    # Enrichment from the "Detalle del Inmueble" section
    area_constructed: Optional[float] = Field(None, ge=0)
    level: Optional[int] = None
    construction_year: Optional[int] = None
    property_status: Optional[str] = None
    country: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    zone: Optional[str] = None
    business_type: Optional[str] = None
    administration_fee: Optional[float] = Field(None, ge=0)

    internal_features: Optional[List[str]] = None
    external_features: Optional[List[str]] = None

    @field_validator('bathrooms')
    def validate_bathrooms(cls, v):
        return snap_to_half(v)

    @field_validator('images')
    def validate_images(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('Image URLs must be unique')
        return v

    @field_validator('description')
    def validate_description(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @field_validator('internal_features', 'external_features')
    def validate_features(cls, v):
        if not v:
            return None
        return unique_in_order(v)

    def to_record(self) -> Dict[str, Any]:
        """
        Build the catalog insert payload.

        Base columns are always present; enrichment columns are only
        included when the scrape found a value for them.
        """
        record: Dict[str, Any] = {
            "title": self.title,
            "source_url": self.source_url,
            "property_type": self.property_type,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking": self.parking,
            "price": self.price,
            "location": self.location,
            "address": self.address,
            "description": self.description,
            "images": list(self.images) or None,
            "is_active": True,
        }

        optional_fields = [
            "area_constructed", "level", "construction_year",
            "property_status", "country", "province", "city", "zone",
            "business_type", "administration_fee",
            "internal_features", "external_features",
        ]
        for name in optional_fields:
            value = getattr(self, name)
            if value:
                record[name] = value

        return record

"""
Catalog contracts.

Entity shapes for the two JSON files backing the catalog:
- categories.json: list of Category
- products.json: list of Product

The files (and the HTTP API) use camelCase keys; these dataclasses use
snake_case attributes and convert at the boundary with to_dict/from_dict.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_LICENSE_YEARS = [1]


@dataclass
class Category:
    id: str
    name: str
    slug: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "slug": self.slug}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Category":
        return cls(id=str(raw.get("id", "")), name=str(raw.get("name", "")), slug=str(raw.get("slug", "")))


@dataclass
class Product:
    id: str
    category_id: str
    name: str
    price: float
    image: str = ""
    description: str = ""
    features: List[str] = field(default_factory=list)
    ar_code_model_url: str = ""
    ar_code_note: str = ""
    has_multi_year_license: bool = False
    license_options_years: List[int] = field(default_factory=lambda: list(DEFAULT_LICENSE_YEARS))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "description": self.description,
            "features": list(self.features),
            "arCodeModelUrl": self.ar_code_model_url,
            "arCodeNote": self.ar_code_note,
            "hasMultiYearLicense": self.has_multi_year_license,
            "licenseOptionsYears": list(self.license_options_years),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Product":
        return cls(
            id=str(raw.get("id", "")),
            category_id=str(raw.get("categoryId", "")),
            name=str(raw.get("name", "")),
            price=coerce_price(raw.get("price", 0)),
            image=str(raw.get("image") or ""),
            description=str(raw.get("description") or ""),
            features=coerce_features(raw.get("features")),
            ar_code_model_url=str(raw.get("arCodeModelUrl") or ""),
            ar_code_note=str(raw.get("arCodeNote") or ""),
            has_multi_year_license=coerce_bool(raw.get("hasMultiYearLicense")),
            license_options_years=coerce_license_years(raw.get("licenseOptionsYears")),
        )


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------


def slugify(name: str) -> str:
    """Lowercase and join whitespace-separated words with hyphens."""
    return "-".join(name.strip().lower().split())


def coerce_price(value: Any) -> float:
    """
    Convert a price from JSON/form input to a number.

    Raises ValueError when the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"price '{value}' is not a number")
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"price '{value}' is not a finite number")
    return number


def coerce_license_years(values: Any) -> List[int]:
    """Keep positive whole-number entries; fall back to [1] when nothing survives."""
    if values is None:
        return list(DEFAULT_LICENSE_YEARS)
    if isinstance(values, str):
        values = values.split(",")
    elif not isinstance(values, Iterable):
        values = [values]

    years: List[int] = []
    for value in values:
        if isinstance(value, bool):
            continue
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            continue
        if not math.isfinite(number) or number <= 0 or not number.is_integer():
            continue
        years.append(int(number))
    return years or list(DEFAULT_LICENSE_YEARS)


def coerce_features(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.splitlines()
    return [str(item).strip() for item in value if str(item).strip()]


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def first_license_option(product: Product) -> int:
    options: Optional[List[int]] = product.license_options_years
    return options[0] if options else DEFAULT_LICENSE_YEARS[0]

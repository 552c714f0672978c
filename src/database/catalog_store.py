"""
JSON-file backed catalog store.

Two files live in the data directory, each a pretty-printed JSON array:
- categories.json
- products.json

Every read re-parses the file; every write serializes the whole list back
through a temporary file that replaces the existing one in one step. Rows that
cannot be parsed are skipped on read; a file that cannot be parsed blocks
writes instead of being overwritten.
Reads and writes run in a worker thread and writes from this process are
serialized by a single asyncio.Lock.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from src.error_handler import CatalogFileCorrupted, ValidationFailed
from src.integrations.contracts.catalog import (
    Category,
    Product,
    coerce_bool,
    coerce_features,
    coerce_license_years,
    coerce_price,
    slugify,
)

logger = logging.getLogger(__name__)

CATEGORIES_FILE = "categories.json"
PRODUCTS_FILE = "products.json"

T = TypeVar("T")


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class CatalogStore:
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._write_lock = asyncio.Lock()

    @property
    def categories_path(self) -> Path:
        return self.data_dir / CATEGORIES_FILE

    @property
    def products_path(self) -> Path:
        return self.data_dir / PRODUCTS_FILE

    # --- Lifecycle -------------------------------------------------------------

    def init(self) -> None:
        """Create the data directory and seed missing files with empty arrays."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.categories_path, self.products_path):
            if not path.exists():
                _write_json_array(path, [])
                logger.info("Created empty catalog file %s", path)

    # --- Reads -----------------------------------------------------------------

    async def list(self) -> Tuple[List[Category], List[Product]]:
        categories_raw, products_raw = await asyncio.gather(
            asyncio.to_thread(_read_json_array, self.categories_path),
            asyncio.to_thread(_read_json_array, self.products_path),
        )
        return _parse_rows(categories_raw, Category.from_dict), _parse_rows(products_raw, Product.from_dict)

    async def list_categories(self) -> List[Category]:
        raw = await asyncio.to_thread(_read_json_array, self.categories_path)
        return _parse_rows(raw, Category.from_dict)

    async def list_products(self) -> List[Product]:
        raw = await asyncio.to_thread(_read_json_array, self.products_path)
        return _parse_rows(raw, Product.from_dict)

    # --- Writes ----------------------------------------------------------------

    async def add_category(self, name: Optional[str], slug: Optional[str] = None) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("Category name is required")

        category = Category(id=new_id("cat"), name=name, slug=(slug or "").strip() or slugify(name))
        async with self._write_lock:
            await asyncio.to_thread(self._append, self.categories_path, category.to_dict())
        logger.info("Added category %s (%s)", category.id, category.slug)
        return category

    async def add_product(self, fields: Dict[str, Any]) -> Product:
        product = build_product(fields)
        async with self._write_lock:
            await asyncio.to_thread(self._append, self.products_path, product.to_dict())
        logger.info("Added product %s in category %s", product.id, product.category_id)
        return product

    @staticmethod
    def _append(path: Path, entry: Dict[str, Any]) -> None:
        items = _load_for_update(path)
        items.append(entry)
        _write_json_array(path, items)


def build_product(fields: Dict[str, Any]) -> Product:
    """Validate raw product fields and coerce them into a Product with a fresh id."""
    name = str(fields.get("name") or "").strip()
    category_id = str(fields.get("categoryId") or "").strip()
    raw_price = fields.get("price")
    if not name or not category_id or not raw_price:
        raise ValidationFailed("name, categoryId and price are required")

    try:
        price = coerce_price(raw_price)
    except (TypeError, ValueError) as e:
        raise ValidationFailed("price must be a number", details=str(e)) from e

    return Product(
        id=new_id("prod"),
        category_id=category_id,
        name=name,
        price=price,
        image=str(fields.get("image") or ""),
        description=str(fields.get("description") or ""),
        features=coerce_features(fields.get("features")),
        ar_code_model_url=str(fields.get("arCodeModelUrl") or ""),
        ar_code_note=str(fields.get("arCodeNote") or ""),
        has_multi_year_license=coerce_bool(fields.get("hasMultiYearLicense")),
        license_options_years=coerce_license_years(fields.get("licenseOptionsYears")),
    )


def _parse_rows(rows: List[Dict[str, Any]], parse: Callable[[Dict[str, Any]], T]) -> List[T]:
    parsed: List[T] = []
    for row in rows:
        try:
            parsed.append(parse(row))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping catalog row %s: %s", row.get("id", "<no id>"), e)
    return parsed


def _load_text(path: Path) -> Optional[Any]:
    """Parsed JSON content of a catalog file, or None when it is missing or blank."""
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if not text.strip():
        return None
    return json.loads(text)


def _read_json_array(path: Path) -> List[Dict[str, Any]]:
    try:
        data = _load_text(path)
    except json.JSONDecodeError as e:
        logger.warning("Catalog file %s is not valid JSON, treating as empty: %s", path, e)
        return []
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning("Catalog file %s does not hold a JSON array, treating as empty", path)
        return []
    return [item for item in data if isinstance(item, dict)]


def _load_for_update(path: Path) -> List[Any]:
    """
    Read a catalog file before rewriting it.

    Unlike reads, a file that cannot be parsed is an error here: appending to an
    empty list would overwrite whatever the operator has on disk.
    """
    try:
        data = _load_text(path)
    except json.JSONDecodeError as e:
        raise CatalogFileCorrupted(f"Catalog file {path.name} is not valid JSON", details=str(e)) from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise CatalogFileCorrupted(f"Catalog file {path.name} does not hold a JSON array")
    return data


def _write_json_array(path: Path, items: List[Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise

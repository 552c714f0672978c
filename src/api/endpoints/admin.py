import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_catalog_store, get_session_registry, require_admin
from src.database.catalog_store import CatalogStore
from src.database.session_registry import AdminSessionRegistry

logger = logging.getLogger(__name__)

api = APIRouter()
admin_api = api


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class CategoryCreateRequest(BaseModel):
    name: str = ""
    slug: Optional[str] = None


class ProductCreateRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    category_id: str = Field(default="", alias="categoryId")
    price: Optional[Union[float, str]] = None
    image: str = ""
    description: str = ""
    features: Union[List[str], str] = Field(default_factory=list)
    ar_code_model_url: str = Field(default="", alias="arCodeModelUrl")
    ar_code_note: str = Field(default="", alias="arCodeNote")
    has_multi_year_license: Union[bool, str] = Field(default=False, alias="hasMultiYearLicense")
    license_options_years: Optional[Union[List[Any], str]] = Field(default=None, alias="licenseOptionsYears")


@api.post("/login", tags=["Admin"])
async def login(body: LoginRequest, registry: AdminSessionRegistry = Depends(get_session_registry)):
    return registry.login(body.username, body.password).to_dict()


@api.get("/catalog", tags=["Admin"], dependencies=[Depends(require_admin)])
async def get_catalog(store: CatalogStore = Depends(get_catalog_store)) -> Dict[str, Any]:
    categories, products = await store.list()
    return {
        "categories": [c.to_dict() for c in categories],
        "products": [p.to_dict() for p in products],
    }


@api.post("/categories", tags=["Admin"], dependencies=[Depends(require_admin)])
async def create_category(body: CategoryCreateRequest, store: CatalogStore = Depends(get_catalog_store)):
    category = await store.add_category(body.name, body.slug)
    return category.to_dict()


@api.post("/products", tags=["Admin"], dependencies=[Depends(require_admin)])
async def create_product(body: ProductCreateRequest, store: CatalogStore = Depends(get_catalog_store)):
    product = await store.add_product(body.model_dump(by_alias=True))
    return product.to_dict()

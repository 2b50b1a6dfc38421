"""
Catalog routes: products, combo products, banners and product search.

The three entity families share one CRUD contract, so they are declared as
rows of RESOURCES and turned into routes by build_router(). Paths differ per
family, so each row spells its own.
"""
import re
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from pymongo.database import Database

from database import (
    create_document,
    delete_document,
    get_db,
    get_document,
    get_documents,
    parse_object_id,
    search_documents,
    serialize_doc,
    update_document,
)
from errors import NotFoundError, ValidationError
from schemas import (
    Banner,
    BannerUpdate,
    Comboproduct,
    ComboproductUpdate,
    NoFilter,
    Product,
    ProductFilter,
    ProductUpdate,
)


@dataclass(frozen=True)
class Resource:
    collection: str
    label: str  # human name used in messages
    key: str  # envelope key for single-document responses
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    create_path: str
    list_path: str
    item_paths: Tuple[str, ...]
    update_path: str
    delete_path: str
    filter_schema: Type[BaseModel] = NoFilter  # query-string equality filters

    @property
    def deleted_key(self) -> str:
        return "deleted" + self.key[0].upper() + self.key[1:]


RESOURCES = (
    Resource(
        collection="product",
        label="Product",
        key="product",
        create_schema=Product,
        update_schema=ProductUpdate,
        create_path="/products",
        list_path="/products",
        item_paths=("/products/{item_id}",),
        update_path="/api/products/{item_id}",
        delete_path="/api/products/{item_id}",
        filter_schema=ProductFilter,
    ),
    Resource(
        collection="comboproduct",
        label="Combo product",
        key="comboProduct",
        create_schema=Comboproduct,
        update_schema=ComboproductUpdate,
        create_path="/combo",
        list_path="/combo",
        item_paths=("/combos/{item_id}", "/combo/{item_id}"),
        update_path="/combo/{item_id}",
        delete_path="/combo/{item_id}",
    ),
    Resource(
        collection="banner",
        label="Banner",
        key="banner",
        create_schema=Banner,
        update_schema=BannerUpdate,
        create_path="/banner",
        list_path="/banner",
        item_paths=("/banner/{item_id}",),
        update_path="/banner/{item_id}",
        delete_path="/banner/{item_id}",
    ),
)


def build_router(resource: Resource) -> APIRouter:
    router = APIRouter(tags=[resource.collection])
    create_schema = resource.create_schema
    update_schema = resource.update_schema
    filter_schema = resource.filter_schema

    def create_item(body: create_schema, db: Database = Depends(get_db)):
        doc = create_document(db, resource.collection, body)
        return serialize_doc(doc)

    def list_items(filters: filter_schema = Depends(), db: Database = Depends(get_db)):
        query = filters.model_dump(exclude_none=True)
        return [serialize_doc(d) for d in get_documents(db, resource.collection, query)]

    def get_item(item_id: str, db: Database = Depends(get_db)):
        oid = parse_object_id(item_id, resource.label.lower())
        doc = get_document(db, resource.collection, oid)
        if not doc:
            raise NotFoundError(resource.label, item_id)
        return {"success": True, resource.key: serialize_doc(doc)}

    def update_item(item_id: str, body: update_schema, db: Database = Depends(get_db)):
        oid = parse_object_id(item_id, resource.label.lower())
        fields = body.model_dump(exclude_none=True)
        if not fields:
            raise ValidationError("No fields provided to update")
        doc = update_document(db, resource.collection, oid, fields)
        if not doc:
            raise NotFoundError(resource.label, item_id)
        return {
            "success": True,
            "message": f"{resource.label} updated successfully",
            resource.key: serialize_doc(doc),
        }

    def delete_item(item_id: str, db: Database = Depends(get_db)):
        oid = parse_object_id(item_id, resource.label.lower())
        doc = delete_document(db, resource.collection, oid)
        if not doc:
            raise NotFoundError(resource.label, item_id)
        return {
            "success": True,
            "message": f"{resource.label} deleted successfully",
            resource.deleted_key: serialize_doc(doc),
        }

    name = resource.collection
    router.add_api_route(
        resource.create_path, create_item, methods=["POST"],
        status_code=status.HTTP_201_CREATED, name=f"create_{name}",
    )
    router.add_api_route(resource.list_path, list_items, methods=["GET"], name=f"list_{name}")
    for path in resource.item_paths:
        router.add_api_route(path, get_item, methods=["GET"], name=f"get_{name}")
    router.add_api_route(resource.update_path, update_item, methods=["PUT"], name=f"update_{name}")
    router.add_api_route(resource.delete_path, delete_item, methods=["DELETE"], name=f"delete_{name}")
    return router


# ----------------------- Search -----------------------
search_router = APIRouter(tags=["search"])


@search_router.get("/search")
def search_products(q: Optional[str] = Query(None), db: Database = Depends(get_db)):
    if not q or not q.strip():
        raise ValidationError("Search query 'q' is required", field="q")
    # Literal match: "C++" must not be read as a regex
    pattern = re.escape(q.strip())
    docs = search_documents(db, "product", ["name", "model"], pattern)
    return [serialize_doc(d) for d in docs]


routers = [build_router(r) for r in RESOURCES] + [search_router]

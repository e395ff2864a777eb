"""
API endpoints for book collections.

Collections group library books under a name. Private collections are
reported as missing to everyone but their owner.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from booktalks_buddy.core.models.io.books import (
    CollectionBookAdd,
    CollectionBookRead,
    CollectionCreate,
    CollectionRead,
    CollectionUpdate,
)
from booktalks_buddy.server.services.deps import CollectionServiceDep, CurrentUserDep, OptionalUserDep

router = APIRouter(tags=["collections"])


@router.post(
    "",
    response_model=CollectionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Collection",
    description="Create a named collection of library books.",
)
async def create_collection(
    payload: CollectionCreate, user: CurrentUserDep, service: CollectionServiceDep
) -> CollectionRead:
    return await service.create(user.id, payload)


@router.get(
    "/users/{owner_id}",
    response_model=List[CollectionRead],
    summary="List User Collections",
    description="A user's collections; others only see the public ones.",
)
async def list_collections(owner_id: str, user: OptionalUserDep, service: CollectionServiceDep) -> List[CollectionRead]:
    return await service.list_for_owner(owner_id, user.id if user else None)


@router.get(
    "/{collection_id}",
    response_model=CollectionRead,
    summary="Get Collection",
    responses={404: {"description": "Collection not found or private"}},
)
async def get_collection(collection_id: str, user: OptionalUserDep, service: CollectionServiceDep) -> CollectionRead:
    return await service.get(user.id if user else None, collection_id)


@router.patch(
    "/{collection_id}",
    response_model=CollectionRead,
    summary="Update Collection",
    description="Rename a collection or change its description or visibility.",
)
async def update_collection(
    collection_id: str, payload: CollectionUpdate, user: CurrentUserDep, service: CollectionServiceDep
) -> CollectionRead:
    return await service.update(user.id, collection_id, payload)


@router.delete(
    "/{collection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Collection",
    description="Delete a collection. The books stay in the library.",
)
async def delete_collection(collection_id: str, user: CurrentUserDep, service: CollectionServiceDep) -> None:
    await service.delete(user.id, collection_id)


@router.get(
    "/{collection_id}/books",
    response_model=List[CollectionBookRead],
    summary="List Collection Books",
)
async def list_collection_books(
    collection_id: str, user: OptionalUserDep, service: CollectionServiceDep
) -> List[CollectionBookRead]:
    return await service.list_books(user.id if user else None, collection_id)


@router.post(
    "/{collection_id}/books",
    response_model=CollectionBookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Book To Collection",
    responses={409: {"description": "Book already in the collection"}},
)
async def add_collection_book(
    collection_id: str, payload: CollectionBookAdd, user: CurrentUserDep, service: CollectionServiceDep
) -> CollectionBookRead:
    entry = await service.add_book(user.id, collection_id, payload.book_id, payload.notes)
    return CollectionBookRead.model_validate(entry)


@router.delete(
    "/{collection_id}/books/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Book From Collection",
)
async def remove_collection_book(
    collection_id: str, book_id: str, user: CurrentUserDep, service: CollectionServiceDep
) -> None:
    await service.remove_book(user.id, collection_id, book_id)

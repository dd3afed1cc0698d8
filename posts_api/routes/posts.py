"""
Posts API: Post Route Handlers
==============================

What:  HTTP surface for the posts resource.
How:   Extracts path/query/body values, delegates to PostService, returns JSON.

Route Table:
    GET     /posts?search=term   → 200 list of posts
    POST    /posts               → 201 created post        | 400
    GET     /posts/{post_id}     → 200 post                | 404
    PUT     /posts/{post_id}     → 200 updated post        | 400 / 404
    PATCH   /posts/{post_id}     → same as PUT
    DELETE  /posts/{post_id}     → 204 empty body          | 404

Bodies are taken as raw JSON values of any shape, or absent; field rules live in
posts_api.validation so every violation is reported in one 400 response.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from posts_api.database import get_db_session
from posts_api.schemas.post import ErrorResponse, PostInput, PostResponse
from posts_api.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_BODY_EXAMPLES = {
    "post": {
        "summary": "A complete post",
        "value": PostInput(
            title="Hello", content="World", category="Tech", tags=["intro"]
        ).model_dump(),
    },
}


@router.get(
    "",
    response_model=List[PostResponse],
    summary="List posts",
    description=(
        "Returns every post, or only those whose title or content contains "
        "`search` (case-insensitive) when the parameter is given."
    ),
)
async def list_posts(
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring matched against title OR content",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    return await post_service.list_posts(db=db, search=search)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PostResponse,
    responses={
        201: {"description": "Post created", "model": PostResponse},
        400: {"description": "Invalid input", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    payload: Any = Body(None, openapi_examples=_BODY_EXAMPLES),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    """
    Create a post.

    Required: title (max 120), content, category.
    Optional: tags (each 4-20 characters).
    """
    return await post_service.create_post(db=db, payload=payload)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Get a single post by ID",
)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.get_post(db=db, post_id=post_id)


@router.api_route(
    "/{post_id}",
    methods=["PUT", "PATCH"],
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Partially update a post",
)
async def update_post(
    post_id: int,
    payload: Any = Body(None, openapi_examples=_BODY_EXAMPLES),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    """
    Update a post.

    Only the supplied fields among title, content, category and tags change.
    Other keys in the body (id, timestamps, ...) are ignored.
    """
    return await post_service.update_post(db=db, post_id=post_id, payload=payload)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete a post",
)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await post_service.delete_post(db=db, post_id=post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

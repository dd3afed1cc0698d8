"""
Posts API: Post Service (Business Logic)
========================================

What:  The five post operations: list, create, get, update, delete.
Why:   Keeps validation and persistence rules independent of HTTP concerns.
How:   Each method receives the request's AsyncSession, issues a single
       statement and flushes; the commit happens in get_db_session.
Who:   Called by route handlers in posts_api.routes.posts.

Error Handling:
    ValidationError and NotFoundError are raised for client mistakes.
    SQLAlchemy errors are left to propagate; the catch-all handler in
    main.py logs them and returns a 500.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from posts_api.exceptions import NotFoundError
from posts_api.models.post import Post
from posts_api.schemas.post import PostResponse
from posts_api.validation import validate_payload

logger = logging.getLogger(__name__)

# Signed 64-bit range of the id column; ids outside it cannot exist
MIN_POST_ID = -(2 ** 63)
MAX_POST_ID = 2 ** 63 - 1

# Only these keys may ever be written by create/update
MUTABLE_FIELDS = ("title", "content", "category", "tags")

LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    """Wraps `term` for a substring LIKE, matching %, _ and \\ literally."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - list_posts(): all posts, or those matching a search term
        - create_post(): validate and insert
        - get_post(): single post retrieval with not-found handling
        - update_post(): resolve, validate, merge supplied fields
        - delete_post(): resolve and remove permanently
    """

    async def _get_or_404(self, db: AsyncSession, post_id: int) -> Post:
        """
        Fetch the Post ORM object or raise NotFoundError.

        Query plan:
            SELECT * FROM posts WHERE id = :id  (primary key lookup)

        Ids outside the column range are answered without a query; drivers
        raise OverflowError when binding them.
        """
        if not MIN_POST_ID <= post_id <= MAX_POST_ID:
            raise NotFoundError(resource="post", resource_id=str(post_id))

        result = await db.execute(select(Post).where(Post.id == post_id))
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return post

    async def list_posts(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
    ) -> List[PostResponse]:
        """
        List posts, optionally filtered by a search term.

        What:    Without a term, every post. With a term, the posts whose
                 title OR content contains it, ignoring case.
        Who:     Called by GET /posts.

        Args:
            db: Async database session
            search: Substring to look for; None or "" disables filtering

        Returns:
            PostResponse list ordered by id (oldest first)
        """
        query = select(Post)
        if search:
            pattern = _like_pattern(search)
            query = query.where(
                or_(
                    Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Post.content.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(Post.id)

        result = await db.execute(query)
        posts = list(result.scalars().all())
        logger.debug("Listed %d posts (search=%r)", len(posts), search)
        return [PostResponse.model_validate(post) for post in posts]

    async def create_post(
        self,
        db: AsyncSession,
        payload: Any,
    ) -> PostResponse:
        """
        Validate a body and insert a new post.

        Args:
            db: Async database session
            payload: Decoded JSON body; None (no body) counts as an empty object

        Returns:
            The created post, including its assigned id

        Raises:
            ValidationError: Body violates the create rules (→ 400)
        """
        data = validate_payload({} if payload is None else payload, partial=False)

        post = Post(**{field: data[field] for field in MUTABLE_FIELDS if field in data})
        db.add(post)
        await db.flush()  # Assigns the id without committing
        logger.info("Post created: %s", post.id)

        return PostResponse.model_validate(post)

    async def get_post(self, db: AsyncSession, post_id: int) -> PostResponse:
        """
        Retrieve a single post by id.

        Raises:
            NotFoundError: No post with that id (→ 404)
        """
        post = await self._get_or_404(db, post_id)
        return PostResponse.model_validate(post)

    async def update_post(
        self,
        db: AsyncSession,
        post_id: int,
        payload: Any,
    ) -> PostResponse:
        """
        Apply a partial update to an existing post.

        What:    Only supplied fields among title, content, category and tags
                 change; anything else in the body is ignored.
        Order:   The post is resolved before the body is validated, so an
                 unknown id is a 404 whatever the body holds.

        Raises:
            NotFoundError: No post with that id (→ 404)
            ValidationError: A supplied field violates its rule (→ 400)
        """
        post = await self._get_or_404(db, post_id)
        data = validate_payload({} if payload is None else payload, partial=True)

        changed = [field for field in MUTABLE_FIELDS if field in data]
        for field in changed:
            setattr(post, field, data[field])

        await db.flush()
        logger.info("Post %s updated: fields=%s", post.id, changed)

        return PostResponse.model_validate(post)

    async def delete_post(self, db: AsyncSession, post_id: int) -> None:
        """
        Remove a post permanently.

        Raises:
            NotFoundError: No post with that id (→ 404)
        """
        post = await self._get_or_404(db, post_id)
        await db.delete(post)
        await db.flush()
        logger.info("Post deleted: %s", post_id)


# Stateless; shared by all requests
post_service = PostService()

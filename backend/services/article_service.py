"""
Article service — create, validate, save, list and remove articles.

Save order:
    1. Declarative field rules (title required), no I/O
    2. Owner reference must resolve to an existing user (one read)
    3. Insert or update

A failure at step 1 or 2 raises ValidationError, nothing is written, and a
stored article is put back to its committed values.
"""
import logging

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from db_models import Article, User
from domain.errors import NotFoundError, ValidationError
from models import ArticleCreate, ArticleResponse
from services import persistence, user_service

logger = logging.getLogger(__name__)

_WITH_OWNER = (selectinload(Article.user),)

_MISSING = object()


def _referenced_user(article: Article):
    """
    Return the owner identity carried by an article.

    Prefers the resolved ``user`` relationship when it is present in memory,
    otherwise falls back to the raw ``user_id`` column. Returns _MISSING for
    a User object that has not been saved yet.
    """
    if "user" not in inspect(article).unloaded:
        user = article.user
        if user is None:
            return None
        return user.id if user.id is not None else _MISSING
    return article.user_id


async def check_owner(db: AsyncSession, article: Article) -> None:
    """Raise ValidationError if the article points at a user that does not exist."""
    user_id = _referenced_user(article)
    if user_id is None:
        return
    if user_id is _MISSING:
        message = "User must be saved before it can own an article"
    else:
        # Pending edits on the article must not be flushed by this lookup
        with db.no_autoflush:
            exists = await user_service.user_exists(db, user_id)
        if exists:
            return
        message = f"User {user_id} does not exist"
    raise ValidationError.from_violations(
        [{"field": "user", "rule": "exists", "message": message}],
        resource_type="Article",
    )


async def save_article(db: AsyncSession, article: Article) -> Article:
    """
    Validate and persist an article (insert if new, update if existing).

    Raises:
        ValidationError: blank title or dangling owner reference
        StoreError: the store was unreachable or rejected the write
    """
    persistence.validate(article)
    try:
        await check_owner(db, article)
    except ValidationError:
        persistence.discard_changes(article)
        raise
    return await persistence.save(db, article)


async def create_article(
    db: AsyncSession,
    *,
    title: str | None,
    content: str = "",
    user: User | None = None,
) -> Article:
    article = Article(title=title, content=content, user=user)
    return await save_article(db, article)


async def get_article(db: AsyncSession, article_id: int) -> Article | None:
    """Load an article with its owner resolved."""
    return await persistence.get(db, Article, article_id, *_WITH_OWNER)


async def require_article(db: AsyncSession, article_id: int) -> Article:
    article = await get_article(db, article_id)
    if article is None:
        raise NotFoundError("Article", str(article_id))
    return article


async def list_articles(db: AsyncSession, *, user_id: int | None = None) -> list[Article]:
    """All articles, newest first, optionally limited to one owner."""
    criteria = [] if user_id is None else [Article.user_id == user_id]
    return await persistence.find_all(
        db,
        Article,
        *criteria,
        options=_WITH_OWNER,
        order_by=(Article.created.desc(), Article.id.desc()),
    )


async def update_article(
    db: AsyncSession,
    article: Article,
    *,
    title: str | None = None,
    content: str | None = None,
) -> Article:
    """
    Apply the provided fields and save. The title rule applies to updates too;
    a rejected update leaves the article at its stored values.
    """
    if title is not None:
        article.title = title
    if content is not None:
        article.content = content
    return await save_article(db, article)


async def count_articles(db: AsyncSession, *, user_id: int | None = None) -> int:
    criteria = [] if user_id is None else [Article.user_id == user_id]
    return await persistence.count(db, Article, *criteria)


async def delete_article(db: AsyncSession, article: Article) -> None:
    await persistence.remove(db, article)


async def remove_all_articles(db: AsyncSession, *, user_id: int | None = None) -> int:
    """Bulk-remove articles (all, or one owner's). Zero matches is fine."""
    criteria = [] if user_id is None else [Article.user_id == user_id]
    removed = await persistence.bulk_remove(db, Article, *criteria)
    logger.debug(f"remove_all_articles(user_id={user_id}) removed {removed}")
    return removed


def to_public(article: Article) -> ArticleResponse:
    """Serialize an article with only the owner's id and display name."""
    return ArticleResponse.model_validate(article)


async def create_article_from(db: AsyncSession, payload: ArticleCreate, user: User | None) -> Article:
    """Create an article from an inbound ArticleCreate payload, owned by ``user``."""
    return await create_article(db, title=payload.title, content=payload.content, user=user)

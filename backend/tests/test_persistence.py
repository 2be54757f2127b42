"""
Tests for the shared persistence helpers.

Tests: validation happens before any I/O, store failures surface as
StoreError and are rolled back, bulk removal on empty tables.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from db_models import Article, User
from domain.errors import StoreError, ValidationError
from services import article_service, persistence


def _store_down():
    return OperationalError("INSERT", {}, Exception("unable to open database file"))


@pytest.mark.asyncio
async def test_failed_validation_attempts_no_io(db_session, article):
    """A blank title must be rejected before anything reaches the session."""
    article.title = ""

    with patch.object(db_session, "add", MagicMock()) as add, \
         patch.object(db_session, "execute", AsyncMock()) as execute, \
         patch.object(db_session, "commit", AsyncMock()) as commit:
        with pytest.raises(ValidationError):
            await article_service.save_article(db_session, article)

    add.assert_not_called()
    execute.assert_not_called()
    commit.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_on_save_is_store_error(db_session, article):
    with patch.object(db_session, "commit", AsyncMock(side_effect=_store_down())):
        with pytest.raises(StoreError) as exc_info:
            await article_service.save_article(db_session, article)

    err = exc_info.value
    assert err.operation == "save Article"
    assert err.status_code == 503
    assert isinstance(err.__cause__, OperationalError)
    assert await article_service.count_articles(db_session) == 0


@pytest.mark.asyncio
async def test_validation_and_store_errors_are_distinct(db_session, article):
    """Both come through the same exception channel but are different types."""
    article.title = ""
    with pytest.raises(ValidationError) as validation:
        await article_service.save_article(db_session, article)

    article.title = "Article Title"
    with patch.object(db_session, "commit", AsyncMock(side_effect=_store_down())):
        with pytest.raises(StoreError) as store:
            await article_service.save_article(db_session, article)

    assert not isinstance(validation.value, StoreError)
    assert not isinstance(store.value, ValidationError)


@pytest.mark.asyncio
async def test_store_failure_on_bulk_remove_is_store_error(db_session):
    with patch.object(db_session, "execute", AsyncMock(side_effect=_store_down())):
        with pytest.raises(StoreError) as exc_info:
            await persistence.bulk_remove(db_session, Article)

    assert exc_info.value.operation == "bulk remove Article"


@pytest.mark.asyncio
async def test_bulk_remove_on_empty_table_is_not_an_error(db_session):
    assert await persistence.bulk_remove(db_session, Article) == 0
    assert await persistence.bulk_remove(db_session, User) == 0


@pytest.mark.asyncio
async def test_bulk_remove_with_criteria(db_session, saved_user):
    await article_service.create_article(db_session, title="Keep", user=saved_user)
    await article_service.create_article(db_session, title="Drop", user=saved_user)

    removed = await persistence.bulk_remove(db_session, Article, Article.title == "Drop")

    assert removed == 1
    remaining = await persistence.find_all(db_session, Article)
    assert [a.title for a in remaining] == ["Keep"]


@pytest.mark.asyncio
async def test_count_with_criteria(db_session, saved_user):
    await article_service.create_article(db_session, title="One", user=saved_user)

    assert await persistence.count(db_session, Article) == 1
    assert await persistence.count(db_session, Article, Article.title == "Two") == 0


@pytest.mark.unit
def test_validate_reports_every_violation():
    user = User(username="", email="")

    with pytest.raises(ValidationError) as exc_info:
        persistence.validate(user)

    fields = [e["field"] for e in exc_info.value.errors]
    assert fields == ["username", "email"]
    assert exc_info.value.details["resource"] == "User"

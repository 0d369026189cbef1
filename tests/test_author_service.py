"""Tests for AuthorService."""

import pytest

from library_api.exceptions import NotFoundError
from library_api.models.book import Book
from library_api.models.book_category import BookCategory
from library_api.models.category import Category
from library_api.schemas.author import AuthorRead
from library_api.services.author_service import AuthorService
from library_api.services.base import ErrorKind
from tests.mocks.repository_mocks import create_mock_unit_of_work


@pytest.fixture
def service(uow):
    return AuthorService(uow)


class TestAuthorService:
    @pytest.mark.asyncio
    async def test_add_then_get_by_id(self, service):
        created, error = await service.add("Ada Lovelace")

        assert error is None
        assert await service.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_get_all_empty(self, service):
        assert await service.get_all() == []

    @pytest.mark.asyncio
    async def test_update(self, service):
        created, _ = await service.add("Ada")

        updated, error = await service.update(created.id, "Grace")

        assert error is None
        assert updated == AuthorRead(id=created.id, name="Grace")

    @pytest.mark.asyncio
    async def test_update_missing_author(self, service):
        result = await service.update(404, "Grace")

        assert result.kind is ErrorKind.NOT_FOUND
        with pytest.raises(NotFoundError, match="Author not found."):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_delete_cascades_books_and_links(self, service, uow, new_uow):
        ada, _ = await service.add("Ada")
        async with uow.transaction():
            fiction = await uow.categories.add(Category(name="Fiction"))
            book = await uow.books.add(Book(title="Notes", author_id=ada.id))
            await uow.book_categories.add(
                BookCategory(book_id=book.id, category_id=fiction.id)
            )

        result = await service.delete(ada.id)

        assert result.ok
        async with new_uow() as check:
            assert await check.authors.get_all() == []
            assert await check.books.get_all() == []
            assert await check.book_categories.get_by_book_id(book.id) == []
            # Categories are not owned by authors
            assert (await check.categories.get_by_id(fiction.id)).books == []

    @pytest.mark.asyncio
    async def test_delete_twice_is_controlled_noop(self, service):
        ada, _ = await service.add("Ada")

        first = await service.delete(ada.id)
        second = await service.delete(ada.id)

        assert first.ok
        assert second.kind is ErrorKind.NOT_FOUND
        assert second.error == "Author not found."


class TestAuthorServiceWithMocks:
    @pytest.mark.asyncio
    async def test_delete_missing_author_writes_nothing(self):
        uow = create_mock_unit_of_work()
        service = AuthorService(uow)

        await service.delete(1)

        uow.rollback.assert_awaited_once()
        uow.authors.delete.assert_not_called()
        uow.books.delete.assert_not_called()
        uow.book_categories.delete_by_book_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_removes_links_before_books(self):
        uow = create_mock_unit_of_work()
        uow.authors.get_by_id.return_value = AuthorRead.model_validate(
            {
                "id": 1,
                "name": "Ada",
                "books": [
                    {"id": 10, "title": "Notes", "authorId": 1},
                    {"id": 11, "title": "Engines", "authorId": 1},
                ],
            }
        )
        calls = []
        uow.book_categories.delete_by_book_id.side_effect = (
            lambda book_id: calls.append(("links", book_id))
        )
        uow.books.delete.side_effect = lambda book_id: calls.append(
            ("book", book_id)
        )
        uow.authors.delete.side_effect = lambda author_id: calls.append(
            ("author", author_id)
        )
        service = AuthorService(uow)

        result = await service.delete(1)

        assert result.ok
        assert calls == [
            ("links", 10),
            ("book", 10),
            ("links", 11),
            ("book", 11),
            ("author", 1),
        ]

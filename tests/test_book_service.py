"""
Tests for BookService.

Most tests run against an in-memory database so that the rollback of a
rejected write can be verified by reading back through a second unit of
work.
"""

from unittest.mock import AsyncMock

import pytest

from library_api.exceptions import ValidationError
from library_api.models.author import Author
from library_api.models.category import Category
from library_api.services.base import ErrorKind
from library_api.services.book_service import BookService
from tests.mocks.repository_mocks import create_mock_unit_of_work


@pytest.fixture
def service(uow, image_storage):
    return BookService(uow, image_storage)


@pytest.fixture
async def library(uow):
    """Author Ada and categories Fiction, Science and Poetry."""
    async with uow.transaction():
        ada = await uow.authors.add(Author(name="Ada"))
        categories = [
            await uow.categories.add(Category(name=name))
            for name in ("Fiction", "Science", "Poetry")
        ]
    return ada, categories


async def _counts(new_uow):
    async with new_uow() as check:
        books = await check.books.get_all()
        links = [
            link
            for book in books
            for link in await check.book_categories.get_by_book_id(book.id)
        ]
        return len(books), len(links)


class TestAddBook:
    @pytest.mark.asyncio
    async def test_creates_book_with_exact_categories(self, service, library):
        ada, (fiction, science, _) = library

        book, error = await service.add(
            "Notes", ada.id, [science.id, fiction.id]
        )

        assert error is None
        assert book.id is not None
        assert book.author_id == ada.id
        assert book.author.name == "Ada"
        assert set(book.category_ids) == {fiction.id, science.id}

    @pytest.mark.asyncio
    async def test_round_trip_through_get_by_id(self, service, library):
        ada, (fiction, *_) = library

        created, _ = await service.add("Notes", ada.id, [fiction.id])

        assert await service.get_by_id(created.id) == created

    @pytest.mark.asyncio
    async def test_missing_author_persists_nothing(
        self, service, library, new_uow
    ):
        _, (fiction, *_) = library

        result = await service.add("Notes", 999, [fiction.id])

        assert tuple(result) == (None, "Author not found.")
        assert result.kind is ErrorKind.INVALID_REFERENCE
        assert await _counts(new_uow) == (0, 0)

    @pytest.mark.asyncio
    async def test_missing_category_named_in_error(
        self, service, library, new_uow
    ):
        ada, (fiction, *_) = library

        book, error = await service.add("Notes", ada.id, [fiction.id, 42, 43])

        assert book is None
        assert error == "Category with ID 42 not found."
        assert await _counts(new_uow) == (0, 0)

    @pytest.mark.asyncio
    async def test_duplicate_category_ids_link_once(self, service, library):
        ada, (fiction, *_) = library

        book, error = await service.add(
            "Notes", ada.id, [fiction.id, fiction.id]
        )

        assert error is None
        assert book.category_ids == [fiction.id]

    @pytest.mark.asyncio
    async def test_unwrap_maps_reference_failure_to_validation_error(
        self, service, library
    ):
        with pytest.raises(ValidationError, match="Author not found."):
            (await service.add("Notes", 999, [1])).unwrap()


class TestUpdateBook:
    @pytest.mark.asyncio
    async def test_replaces_category_set(self, service, library, new_uow):
        ada, (fiction, science, poetry) = library
        created, _ = await service.add("Notes", ada.id, [fiction.id, science.id])

        updated, error = await service.update(
            created.id, "Verses", ada.id, [poetry.id]
        )

        assert error is None
        assert updated.title == "Verses"
        async with new_uow() as check:
            links = await check.book_categories.get_by_book_id(created.id)
        assert [link.category_id for link in links] == [poetry.id]

    @pytest.mark.asyncio
    async def test_missing_book(self, service, library):
        ada, (fiction, *_) = library

        result = await service.update(404, "Verses", ada.id, [fiction.id])

        assert result.error == "Book not found."
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_missing_category_keeps_previous_state(
        self, service, library, new_uow
    ):
        ada, (fiction, *_) = library
        created, _ = await service.add("Notes", ada.id, [fiction.id])

        _, error = await service.update(created.id, "Verses", ada.id, [77])

        assert error == "Category with ID 77 not found."
        async with new_uow() as check:
            book = await check.books.get_by_id(created.id)
        assert book.title == "Notes"
        assert book.category_ids == [fiction.id]


class TestDeleteBook:
    @pytest.mark.asyncio
    async def test_removes_book_and_links(self, service, library, new_uow):
        ada, (fiction, *_) = library
        created, _ = await service.add("Notes", ada.id, [fiction.id])

        result = await service.delete(created.id)

        assert result.ok
        assert await _counts(new_uow) == (0, 0)
        async with new_uow() as check:
            assert (await check.categories.get_by_id(fiction.id)).books == []

    @pytest.mark.asyncio
    async def test_missing_book(self, service):
        result = await service.delete(404)

        assert result.kind is ErrorKind.NOT_FOUND


class TestUploadImage:
    @pytest.mark.asyncio
    async def test_stores_file_and_records_path(
        self, service, library, image_storage, new_uow
    ):
        ada, (fiction, *_) = library
        created, _ = await service.add("Notes", ada.id, [fiction.id])

        path, error = await service.upload_image(created.id, "cover.PNG", b"png")

        assert error is None
        assert path == f"/{created.id}.png"
        assert (image_storage.root / f"{created.id}.png").read_bytes() == b"png"
        async with new_uow() as check:
            assert (await check.books.get_by_id(created.id)).image_path == path

    @pytest.mark.asyncio
    async def test_unsupported_type_rolls_back(
        self, service, library, image_storage
    ):
        ada, (fiction, *_) = library
        created, _ = await service.add("Notes", ada.id, [fiction.id])

        with pytest.raises(ValidationError, match="Unsupported image type."):
            await service.upload_image(created.id, "cover.exe", b"bin")

        assert not service.uow.in_transaction
        assert not image_storage.root.exists()

    @pytest.mark.asyncio
    async def test_missing_book(self, service):
        result = await service.upload_image(404, "cover.jpg", b"jpg")

        assert result.kind is ErrorKind.NOT_FOUND


class TestBookServiceWithMocks:
    @pytest.mark.asyncio
    async def test_rejected_reference_rolls_back_before_writing(self):
        uow = create_mock_unit_of_work()
        service = BookService(uow, image_storage=AsyncMock())

        _, error = await service.add("Notes", 1, [1])

        assert error == "Author not found."
        uow.rollback.assert_awaited_once()
        uow.books.add.assert_not_called()
        uow.book_categories.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_categories_checked_in_given_order(self):
        uow = create_mock_unit_of_work()
        uow.authors.get_by_id.return_value = object()
        uow.categories.get_by_id.side_effect = [object(), None, None]
        service = BookService(uow, image_storage=AsyncMock())

        _, error = await service.add("Notes", 1, [5, 9, 3])

        assert error == "Category with ID 9 not found."
        assert [c.args[0] for c in uow.categories.get_by_id.await_args_list] == [
            5,
            9,
        ]

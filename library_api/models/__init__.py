from library_api.models.author import Author
from library_api.models.book import Book
from library_api.models.book_category import BookCategory
from library_api.models.category import Category

__all__ = ["Author", "Book", "BookCategory", "Category"]

"""
Local storage of uploaded book cover images.

Images are written to ``<root>/<book_id><ext>`` and referred to by the
relative path ``/<book_id><ext>``, which is what gets stored on the book.
"""

import asyncio
from pathlib import Path, PurePath

from library_api.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    DEFAULT_IMAGE_EXTENSION,
)
from library_api.exceptions import ValidationError
from library_api.logging import logger


class ImageStorage:
    """
    Writes book images below a root directory.

    Attributes:
        root: Directory images are stored in; created on first write.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    @staticmethod
    def extension_for(filename: str | None) -> str:
        """
        Pick the stored file extension from the uploaded file name.

        Raises:
            ValidationError: If the extension is not an accepted image type.
        """
        suffix = PurePath(filename or "").suffix.lower()
        if not suffix:
            return DEFAULT_IMAGE_EXTENSION
        if suffix not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError("Unsupported image type.")
        return suffix

    def relative_path(self, book_id: int, extension: str) -> str:
        return f"/{book_id}{extension}"

    async def save(self, book_id: int, filename: str | None, content: bytes) -> str:
        """
        Store an image for a book, replacing any previous one.

        Args:
            book_id: Book the image belongs to.
            filename: Name of the uploaded file, used for its extension.
            content: Raw image bytes.

        Returns:
            The relative path of the stored image, e.g. "/1.jpg".
        """
        extension = self.extension_for(filename)
        target = self.root / f"{book_id}{extension}"

        def write() -> None:
            self.root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        await asyncio.to_thread(write)
        logger.info(f"Stored image for book {book_id} at {target}")
        return self.relative_path(book_id, extension)

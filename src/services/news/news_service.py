"""Service for managing news items and their images."""

import asyncio
import threading
from datetime import datetime, timezone

from src.core.exceptions import NotFoundError, StorageError, ValidationError
from src.core.logger import get_logger
from src.integrations.assets import AssetManager, UploadedAsset
from src.integrations.news import NewsItem, RecordStore

logger = get_logger(__name__)


class NewsService:
    """
    Lists, creates and deletes news items.

    Mutations go through a single lock, so id assignment and the store
    write that follows it never interleave with another mutation. The
    worker thread holds its own lock too: a cancelled request releases the
    asyncio lock while its thread is still writing. Reads take no lock:
    the store file is replaced atomically.
    """

    def __init__(self, store: RecordStore, assets: AssetManager, max_media_files: int = 20):
        """
        Initialize service.

        Args:
            store: Store of news records
            assets: Manager of image files
            max_media_files: Maximum number of secondary images per item
        """
        self.store = store
        self.assets = assets
        self.max_media_files = max_media_files
        self._lock = asyncio.Lock()
        self._write_lock = threading.Lock()

    async def list_news(self) -> list[NewsItem]:
        """Get all news items in store order."""
        return await asyncio.to_thread(self.store.read)

    def _validate(
        self,
        title: str | None,
        description: str | None,
        full_text: str | None,
        image: UploadedAsset | None,
        media: list[UploadedAsset],
    ):
        if not (title and description and full_text) or image is None:
            raise ValidationError('Fill in all required fields')
        if len(media) > self.max_media_files:
            raise ValidationError(f'Too many media files (maximum {self.max_media_files})')

        for upload in (image, *media):
            self.assets.validate(upload)

    def _discard(self, paths: list[str]):
        """Delete files stored by a failed operation."""
        for path in paths:
            try:
                self.assets.delete(path)
            except OSError as e:
                logger.error(f'Error deleting file {path}: {e}')

    def _create_sync(
        self,
        title: str,
        description: str,
        full_text: str,
        image: UploadedAsset,
        media: list[UploadedAsset],
    ) -> NewsItem:
        with self._write_lock:
            return self._create_locked(title, description, full_text, image, media)

    def _create_locked(
        self,
        title: str,
        description: str,
        full_text: str,
        image: UploadedAsset,
        media: list[UploadedAsset],
    ) -> NewsItem:
        current_news = self.store.load_for_update()
        new_id = max((item.id for item in current_news), default=0) + 1

        stored: list[str] = []
        try:
            for upload in (image, *media):
                stored.append(self.assets.store(upload))

            news_item = NewsItem(
                id=new_id,
                title=title,
                date=datetime.now(timezone.utc).date().isoformat(),
                description=description,
                image=stored[0],
                fullText=full_text,
                media=stored[1:] or None,
            )
            self.store.write([*current_news, news_item])
        except StorageError:
            logger.error(f'Error adding news item {new_id}, removing {len(stored)} stored files')
            self._discard(stored)
            raise
        except Exception as e:
            logger.error(f'Error adding news item {new_id}: {e}', exc_info=True)
            self._discard(stored)
            raise StorageError('Error adding news item') from e

        logger.info(f'News item {new_id} created with {len(stored) - 1} media files')
        return news_item

    async def create(
        self,
        title: str | None,
        description: str | None,
        full_text: str | None,
        image: UploadedAsset | None,
        media: list[UploadedAsset] | None = None,
    ) -> NewsItem:
        """
        Create a news item.

        Images are written before the record; if anything fails afterwards
        the images written by this call are deleted again.

        Args:
            title: News title
            description: Short description
            full_text: Full news text
            image: Main image upload
            media: Secondary image uploads

        Returns:
            Created news item

        Raises:
            ValidationError: Required field or main image missing
            UploadError: Upload is not an image or is too large
            StorageError: Store is corrupt, or files or store could not be written
        """
        media = media or []
        self._validate(title, description, full_text, image, media)

        async with self._lock:
            return await asyncio.to_thread(self._create_sync, title, description, full_text, image, media)

    def _delete_sync(self, news_id: int) -> NewsItem:
        with self._write_lock:
            return self._delete_locked(news_id)

    def _delete_locked(self, news_id: int) -> NewsItem:
        current_news = self.store.load_for_update()
        news_to_delete = next((item for item in current_news if item.id == news_id), None)
        if news_to_delete is None:
            raise NotFoundError(f'News item {news_id} not found')

        # The record goes first: a failed write must leave its files in place.
        self.store.write([item for item in current_news if item.id != news_id])
        self._discard(news_to_delete.asset_paths())

        logger.info(f'News item {news_id} deleted')
        return news_to_delete

    async def delete(self, news_id: int) -> NewsItem:
        """
        Delete a news item together with its image files.

        Args:
            news_id: Id of the news item

        Returns:
            Deleted news item

        Raises:
            NotFoundError: No news item with this id
            StorageError: Store is corrupt or could not be written; files are kept
        """
        async with self._lock:
            return await asyncio.to_thread(self._delete_sync, news_id)

import random
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from src.core.exceptions import StorageError, UploadError
from src.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadedAsset:
    """Fully buffered upload, as received from the client."""

    filename: str
    content_type: str | None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class AssetManager:
    """
    Stores news images on local disk.

    Files are named `news-<epoch ms>-<random><ext>` and exposed under a
    public URL prefix; stored paths use that prefix, not the disk location.
    """

    NAME_PREFIX = 'news'
    NAME_ATTEMPTS = 10

    def __init__(
        self,
        directory: str | Path,
        url_prefix: str,
        max_size: int = 5 * 1024 * 1024,
        allowed_type_prefix: str = 'image/',
    ):
        """
        Initialize manager.

        Args:
            directory: Asset directory on disk
            url_prefix: Public URL prefix the directory is served under
            max_size: Maximum payload size in bytes
            allowed_type_prefix: Accepted media type prefix
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip('/')
        self.max_size = max_size
        self.allowed_type_prefix = allowed_type_prefix

    def ensure_directory(self):
        """Create the asset directory if it is missing."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def validate(self, upload: UploadedAsset):
        """
        Check an upload before anything is written.

        Raises:
            UploadError: Wrong media type or payload too large
        """
        if not (upload.content_type or '').startswith(self.allowed_type_prefix):
            raise UploadError(f'Only images are allowed: {upload.filename}')
        if upload.size > self.max_size:
            limit_mb = self.max_size / (1024 * 1024)
            raise UploadError(f'File is too large (maximum {limit_mb:g}MB): {upload.filename}')

    def generate_name(self, original_filename: str) -> str:
        """Build a file name that keeps the original extension."""
        extension = PurePosixPath(original_filename.replace('\\', '/')).suffix
        timestamp = int(time.time() * 1000)
        return f'{self.NAME_PREFIX}-{timestamp}-{random.randint(0, 10**9)}{extension}'

    def resolve(self, path: str) -> Path:
        """Map a stored public path to its file inside the asset directory."""
        return self.directory / PurePosixPath(path).name

    def store(self, upload: UploadedAsset) -> str:
        """
        Validate and write an upload.

        Args:
            upload: Buffered upload

        Returns:
            Public path of the stored file

        Raises:
            UploadError: Upload rejected by validation
            StorageError: File could not be written
        """
        self.validate(upload)

        for _ in range(self.NAME_ATTEMPTS):
            name = self.generate_name(upload.filename)
            file_path = self.directory / name
            try:
                with open(file_path, 'xb') as file:
                    file.write(upload.content)
            except FileExistsError:
                logger.debug(f'Asset name {name} already taken, generating another')
                continue
            except OSError as e:
                file_path.unlink(missing_ok=True)
                logger.error(f'Error writing asset {file_path}: {e}')
                raise StorageError(f'Cannot store file {upload.filename}') from e

            logger.info(f'Stored asset {name} ({upload.size} bytes)')
            return f'{self.url_prefix}/{name}'

        raise StorageError(f'Cannot pick a free name for {upload.filename}')

    def delete(self, path: str):
        """Remove a stored file. Missing files are ignored."""
        file_path = self.resolve(path)
        file_path.unlink(missing_ok=True)
        logger.info(f'Deleted asset {file_path.name}')

import logging
import os
import shutil
import time
from typing import BinaryIO

logger = logging.getLogger('blogapi.images')

ALLOWED_MIMETYPES = ('image/png', 'image/jpg', 'image/jpeg')


class ImageStorage:
    """Stores uploaded images in a single directory on disk.

    Stored files are referenced by ``<url_prefix>/<filename>``, which is also
    the path under which they are served.
    """

    def __init__(self, directory: str, url_prefix: str = 'images') -> None:
        self.directory = directory
        self.url_prefix = url_prefix.strip('/')
        os.makedirs(self.directory, exist_ok=True)

    @staticmethod
    def accepts(content_type: str | None) -> bool:
        return content_type in ALLOWED_MIMETYPES

    def store(self, filename: str, source: BinaryIO) -> str:
        """Copy an uploaded file object to disk in chunks. Blocking: run it off the event loop."""
        name = f'{int(time.time() * 1000)}-{os.path.basename(filename)}'
        with open(os.path.join(self.directory, name), 'wb') as f:
            shutil.copyfileobj(source, f)
        logger.info(f'Stored image {name}')
        return f'{self.url_prefix}/{name}'

    def clear(self, file_path: str | None) -> None:
        """Discard a stored image. Failures are logged, never raised."""
        if not file_path:
            return
        name = os.path.basename(file_path.replace('\\', '/'))
        if not name:
            return
        path = os.path.join(self.directory, name)
        try:
            os.remove(path)
            logger.info(f'Discarded image {name}')
        except FileNotFoundError:
            logger.warning(f'Image not found, nothing to discard: {name}')
        except OSError as e:
            logger.error(f'Failed to discard image {name}: {e}')

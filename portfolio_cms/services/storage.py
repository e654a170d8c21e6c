import logging
import os

logger = logging.getLogger(__name__)


class LocalStorage:
    """Byte storage on local disk, keyed by the generated file name."""

    def __init__(self, root_dir, url_prefix="/static/uploads"):
        self.root_dir = root_dir
        self.url_prefix = url_prefix.rstrip("/")

    def _path(self, key):
        # keys are generated by MediaService, never user supplied
        return os.path.join(self.root_dir, os.path.basename(key))

    def write(self, data: bytes, key: str) -> str:
        os.makedirs(self.root_dir, exist_ok=True)
        with open(self._path(key), "wb") as fh:
            fh.write(data)
        return f"{self.url_prefix}/{key}"

    def delete(self, key: str) -> bool:
        """False when the file was already gone."""
        path = self._path(key)
        if not os.path.exists(path):
            logger.info("Stored file %s already missing", key)
            return False
        os.remove(path)
        return True

    def exists(self, key: str) -> bool:
        return os.path.exists(self._path(key))

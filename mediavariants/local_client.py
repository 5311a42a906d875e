"""
LocalClient - Object store operations on the local filesystem.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass
class LocalConfig:
    """
    Local storage settings.
    
    Attributes:
        root_path: Root directory (e.g., /srv/media)
        prefix: Subdirectory under the root holding media files
    """
    root_path: str
    prefix: str = 'media'
    
    @property
    def base_path(self) -> Path:
        return Path(self.root_path) / self.prefix.strip('/')
    
    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        errors = []
        if not self.root_path:
            errors.append("Local root path is required")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Local root path does not exist: {self.root_path}")
        return errors


class LocalClient:
    """
    Object store backed by a directory tree.
    
    Used for local development and tests; mirrors S3Client's put/get/delete.
    """
    
    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
    
    def _path_for(self, key: str) -> Path:
        base = self.config.base_path.resolve()
        path = (base / key.lstrip('/')).resolve()
        if path != base and base not in path.parents:
            raise ValueError(f"Key escapes storage root: {key}")
        return path
    
    def put(self, key: str, data: bytes, content_type: str = 'application/octet-stream') -> None:
        """Write an object. The content type is not stored on disk."""
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + '.tmp')
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
        self.logger.debug(f"Wrote {path} ({len(data)} bytes, {content_type})")
    
    def get(self, key: str) -> Optional[bytes]:
        """Read an object, or return None if it does not exist."""
        path = self._path_for(key)
        if not path.is_file():
            return None
        return path.read_bytes()
    
    def delete(self, key: str) -> None:
        """Delete an object. Deleting a missing key is a no-op."""
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        else:
            self.logger.debug(f"Deleted {path}")
    
    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()
    
    def public_url(self, key: str) -> Optional[str]:
        return None

import json
import logging
import os
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Key-value backend holding JSON credential records"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the record stored under key, or None"""

    @abstractmethod
    async def put(self, key: str, record: Dict[str, Any]) -> None:
        """Replace the record stored under key"""

    def describe(self) -> str:
        return type(self).__name__


class MemoryCredentialStore(CredentialStore):
    """Process-local store, used in tests and when no file is configured"""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._records: Dict[str, str] = {}
        for key, record in (initial or {}).items():
            self._records[key] = json.dumps(record)

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._records.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def put(self, key: str, record: Dict[str, Any]) -> None:
        # Serialize so callers can't mutate the stored copy
        self._records[key] = json.dumps(record)

    def describe(self) -> str:
        return "memory"


class FileCredentialStore(CredentialStore):
    """JSON file store with owner-only permissions

    All keys share one file; each put rewrites it through a temporary file so a
    reader never sees a half-written record.
    """

    def __init__(self, credentials_file: str):
        self.credentials_path = Path(credentials_file).expanduser()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.credentials_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _read_all(self) -> Dict[str, Any]:
        if not self.credentials_path.exists():
            return {}
        try:
            data = json.loads(self.credentials_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read credentials from {self.credentials_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring credentials file {self.credentials_path}: expected a JSON object")
            return {}
        return data

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._read_all().get(key)
        if isinstance(record, dict):
            return record
        return None

    async def put(self, key: str, record: Dict[str, Any]) -> None:
        self._ensure_secure_directory()
        data = self._read_all()
        data[key] = record

        tmp_path = self.credentials_path.with_suffix(self.credentials_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2))
        if platform.system() != "Windows":
            os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.credentials_path)
        logger.debug(f"Saved credentials '{key}' to {self.credentials_path}")

    def describe(self) -> str:
        return str(self.credentials_path)

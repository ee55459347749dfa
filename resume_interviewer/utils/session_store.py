"""
Session store for Resume Interviewer sessions.

This module provides the persistence contract for interview sessions and its
two interchangeable backends: a local JSON file map and a MongoDB collection.
Every save is a last-writer-wins full overwrite of one session record.
"""
import os
import json
import logging
import tempfile
import threading
from typing import Dict, List, Optional, Any

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from resume_interviewer.core.errors import StorageUnavailable
from resume_interviewer.models.session import Session
from resume_interviewer.utils.config import get_store_config
from resume_interviewer.utils.db import get_mongodb_client

logger = logging.getLogger(__name__)


class SessionStore:
    """CRUD contract shared by all session store backends."""

    backend_name = "abstract"

    def save(self, session_id: str, session: Session) -> None:
        raise NotImplementedError

    def get(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def list(self) -> List[Session]:
        """Return all sessions. Order is unspecified; callers sort."""
        raise NotImplementedError

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        raise NotImplementedError

    def ping(self) -> bool:
        """Check that the backing medium is reachable."""
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with proper cleanup."""
        self.close()


def _parse_session(session_id: str, document: Dict[str, Any]) -> Session:
    try:
        return Session.model_validate(document)
    except PydanticValidationError as e:
        logger.error(f"Stored session {session_id} is invalid: {e}")
        raise StorageUnavailable(f"Stored session {session_id} is corrupt") from e


class JsonFileSessionStore(SessionStore):
    """Sessions kept in a single JSON document: ``{"sessions": {id: session}}``."""

    backend_name = "file"

    def __init__(self, path: str):
        """
        Initialize the file store.

        Args:
            path: Location of the JSON file; created on first save
        """
        self.path = os.path.abspath(path)
        self._lock = threading.Lock()
        logger.info(f"File session store initialized at {self.path}")

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading session store {self.path}: {e}")
            raise StorageUnavailable(f"Cannot read session store: {e}") from e

        sessions = data.get("sessions") if isinstance(data, dict) else None
        if not isinstance(sessions, dict):
            logger.error(f"Session store {self.path} has no sessions map")
            raise StorageUnavailable("Session store file is malformed")
        return sessions

    def _write(self, sessions: Dict[str, Dict[str, Any]]) -> None:
        directory = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".sessions-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"sessions": sessions}, f, indent=2)
            # rename is atomic on the same filesystem
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error writing session store {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageUnavailable(f"Cannot write session store: {e}") from e

    def save(self, session_id: str, session: Session) -> None:
        with self._lock:
            sessions = self._load()
            sessions[session_id] = session.to_document()
            self._write(sessions)
        logger.debug(f"Saved session {session_id}")

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            document = self._load().get(session_id)
        if document is None:
            return None
        return _parse_session(session_id, document)

    def list(self) -> List[Session]:
        with self._lock:
            sessions = self._load()
        return [_parse_session(sid, doc) for sid, doc in sessions.items()]

    def delete(self, session_id: str) -> bool:
        with self._lock:
            sessions = self._load()
            if session_id not in sessions:
                logger.warning(f"Session {session_id} not found for deletion")
                return False
            del sessions[session_id]
            self._write(sessions)
        logger.info(f"Deleted session {session_id}")
        return True

    def ping(self) -> bool:
        with self._lock:
            self._load()
        return True


class MongoSessionStore(SessionStore):
    """Sessions kept one document per session, keyed by ``_id``."""

    backend_name = "mongodb"

    def __init__(
        self,
        connection_uri: Optional[str] = None,
        database_name: str = "resume_interviewer",
        collection_name: str = "sessions",
        client: Any = None,
    ):
        """
        Initialize the MongoDB store.

        Args:
            connection_uri: MongoDB connection URI
            database_name: Name of the database
            collection_name: Name of the collection holding sessions
            client: Optional pre-built client (used by tests)
        """
        self.client = client if client is not None else get_mongodb_client(connection_uri)
        self.collection = self.client[database_name][collection_name]
        logger.info(f"MongoDB session store initialized on {database_name}.{collection_name}")

    def save(self, session_id: str, session: Session) -> None:
        document = session.to_document()
        document["_id"] = session_id
        try:
            self.collection.replace_one({"_id": session_id}, document, upsert=True)
        except PyMongoError as e:
            logger.error(f"Error saving session {session_id}: {e}")
            raise StorageUnavailable(f"Cannot save session: {e}") from e

    def get(self, session_id: str) -> Optional[Session]:
        try:
            document = self.collection.find_one({"_id": session_id})
        except PyMongoError as e:
            logger.error(f"Error retrieving session {session_id}: {e}")
            raise StorageUnavailable(f"Cannot read session: {e}") from e
        if document is None:
            return None
        document.pop("_id", None)
        return _parse_session(session_id, document)

    def list(self) -> List[Session]:
        try:
            documents = list(self.collection.find({}))
        except PyMongoError as e:
            logger.error(f"Error listing sessions: {e}")
            raise StorageUnavailable(f"Cannot list sessions: {e}") from e
        sessions = []
        for document in documents:
            session_id = document.pop("_id", None)
            sessions.append(_parse_session(str(session_id), document))
        logger.info(f"Found {len(sessions)} sessions")
        return sessions

    def delete(self, session_id: str) -> bool:
        try:
            result = self.collection.delete_one({"_id": session_id})
        except PyMongoError as e:
            logger.error(f"Error deleting session {session_id}: {e}")
            raise StorageUnavailable(f"Cannot delete session: {e}") from e
        if result.deleted_count > 0:
            logger.info(f"Deleted session {session_id}")
            return True
        logger.warning(f"Session {session_id} not found for deletion")
        return False

    def ping(self) -> bool:
        try:
            self.client.admin.command("ping")
        except PyMongoError as e:
            raise StorageUnavailable(f"Cannot reach MongoDB: {e}") from e
        return True

    def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")


def create_session_store(config: Optional[Dict[str, Any]] = None) -> SessionStore:
    """
    Build the session store selected by configuration.

    Args:
        config: Store configuration (defaults to ``get_store_config()``)

    Returns:
        A ready-to-use SessionStore
    """
    config = config or get_store_config()
    backend = config.get("backend", "file")
    if backend == "file":
        return JsonFileSessionStore(config["path"])
    if backend == "mongodb":
        return MongoSessionStore(
            connection_uri=config.get("uri"),
            database_name=config.get("database", "resume_interviewer"),
            collection_name=config.get("sessions_collection", "sessions"),
        )
    raise ValueError(f"Unknown session store backend: {backend}")

from typing import Optional
from pymongo import MongoClient
from pymongo.errors import PyMongoError
import logging

from .config import get_db_config
from resume_interviewer.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)

def get_mongodb_client(uri: Optional[str] = None) -> MongoClient:
    """Get MongoDB client with proper connection settings."""
    uri = uri or get_db_config().get("uri")

    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=5000,
            socketTimeoutMS=20000,
            connectTimeoutMS=10000
        )

        # Test connection
        client.admin.command('ping')
        logger.info("Successfully connected to MongoDB")
        return client
    except PyMongoError as e:
        # also covers InvalidURI and ConfigurationError raised by the constructor
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise StorageUnavailable(f"Cannot reach MongoDB: {e}") from e

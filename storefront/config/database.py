"""
Database configuration and connection management.
Handles MongoDB connection lifecycle and database operations.
"""
import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException

from .settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class DatabaseManager:
    """Manages MongoDB database connection and operations."""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            logger.info("🚀 Connecting to MongoDB...")

            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
                connectTimeoutMS=settings.mongodb_connect_timeout_ms,
                socketTimeoutMS=settings.mongodb_socket_timeout_ms,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
                retryWrites=settings.mongodb_retry_writes,
                directConnection=settings.mongodb_direct_connection,
            )

            # Test connection before handing the database out
            await self.client.admin.command('ping')
            self.database = self.client[settings.database_name]
            logger.info("✅ Connected to MongoDB successfully")

        except Exception as db_error:
            # Routes answer 503 until a connection exists
            logger.warning(f"⚠️  MongoDB connection failed: {db_error}")

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        try:
            if self.client is not None:
                self.client.close()
                logger.info("🔌 MongoDB connection closed")
        except Exception as e:
            logger.error(f"Error during database disconnect: {e}")
        finally:
            self.client = None
            self.database = None

    async def create_indexes(self) -> None:
        """Create database indexes for lookups and uniqueness constraints."""
        if self.database is None:
            logger.warning("Database not connected, skipping index creation")
            return

        try:
            await create_indexes(self.database)
            logger.info("✅ Database indexes created successfully")
        except Exception as index_error:
            logger.warning(f"⚠️  Failed to create indexes: {index_error}")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database

    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self.database is not None


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    # Users
    await database.users.create_index("email", unique=True)
    await database.password_reset_tokens.create_index("user")

    # Catalog
    await database.brands.create_index("name", unique=True)
    await database.categories.create_index("name", unique=True)
    await database.products.create_index("brand")
    await database.products.create_index("category")
    await database.products.create_index("is_deleted")
    await database.products.create_index("created_at")

    # Per-user collections
    await database.orders.create_index([("user", ASCENDING), ("created_at", DESCENDING)])
    await database.orders.create_index("status")
    await database.carts.create_index("user")
    await database.addresses.create_index("user")
    await database.wishlists.create_index([("user", ASCENDING), ("product", ASCENDING)], unique=True)
    await database.reviews.create_index([("product", ASCENDING), ("created_at", DESCENDING)])


# Global database manager instance
db_manager = DatabaseManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for database connection."""
    logger.info("🚀 Starting up application...")
    await db_manager.connect()
    await db_manager.create_indexes()

    # Store database manager in app state for dependency injection
    app.state.db_manager = db_manager

    yield

    await db_manager.disconnect()


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency to get database instance."""
    if not db_manager.is_connected():
        raise HTTPException(
            status_code=503,
            detail="Database connection not available. Please check your MongoDB connection."
        )
    return db_manager.get_database()


def get_database_manager() -> DatabaseManager:
    """Get database manager instance."""
    return db_manager

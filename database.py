# oee_tracker/database.py
"""Database connection and management"""
from mysql.connector.pooling import MySQLConnectionPool
from contextlib import contextmanager
from fastapi import HTTPException
import threading
import logging
from config import db_config

logger = logging.getLogger(__name__)

_pool = None

# Thread lock for pool creation
lock = threading.Lock()


def get_pool() -> MySQLConnectionPool:
    """Return the shared connection pool, creating it on first use"""
    global _pool
    with lock:
        if _pool is None:
            try:
                _pool = MySQLConnectionPool(
                    pool_name="oee_tracker_pool",
                    pool_size=db_config.pool_size,
                    **db_config.config
                )
                logger.info(f"Database connection pool initialized with {db_config.pool_size} connections")
            except Exception as e:
                logger.error(f"Failed to initialize database pool: {e}")
                raise
    return _pool


@contextmanager
def get_db_connection(dictionary: bool = False):
    """Context manager for database connections"""
    conn = None
    cursor = None
    try:
        conn = get_pool().get_connection()
        cursor = conn.cursor(buffered=True, dictionary=dictionary)
        yield cursor
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        raise HTTPException(status_code=500, detail="Database connection failed")
    finally:
        if cursor:
            cursor.close()
        if conn:
            conn.close()

"""Database and Redis connections"""

import os

import redis
from sqlalchemy import create_engine
from sqlmodel import Session

from checkin_kiosk.config import config

# Database URL from config
DATABASE_URL = config["database_url"]

if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Set DATABASE_URL in the environment or local .env file."
    )

# SQLite connections are shared across the threadpool FastAPI runs handlers in
connect_args = (
    {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create engine
engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("DEBUG", "false").lower() == "true",
    connect_args=connect_args,
)

# Redis URL from config
REDIS_URL = config["redis_url"]

# Create Redis client (singleton) with connection pool configuration
redis_client = redis.from_url(
    REDIS_URL,
    decode_responses=True,
    max_connections=20,  # Max connections in pool
    socket_connect_timeout=5,  # Connection timeout in seconds
    socket_keepalive=True,  # Enable TCP keepalive
    retry_on_timeout=True,  # Retry on timeout
)


def get_db():
    """Get database session"""
    with Session(engine) as session:
        yield session


def get_redis():
    """Get Redis client"""
    return redis_client

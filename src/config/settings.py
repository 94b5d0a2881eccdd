"""
Configuration settings for the User API service
"""

import os
import logging

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Environment configuration
MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "user_api")
USERS_COLLECTION = "users"
PORT = int(os.getenv("PORT", 3000))

# Validate required environment variables
if not MONGO_URI:
    raise ValueError("MONGO_URI environment variable is required")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

logger.info(f"Database: {MONGO_DB_NAME}, collection: {USERS_COLLECTION}")

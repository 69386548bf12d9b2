"""Configuration module for the Employee Document Portal.

This module provides centralized configuration management, including directory
paths, API server settings, authentication settings and compliance policy.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (database file and uploaded documents live here)
DATA_DIR_NAME = os.getenv("DATA_DIR_NAME", "data")
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# Uploaded file bytes, stored under randomized names
UPLOAD_DIR_NAME = "uploads"
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / UPLOAD_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/document_portal.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080,"
    "http://127.0.0.1:8080",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

# Tokens are stateless and cannot be revoked, so keep the window short
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Document Configuration ---

# Display list of upload categories; the file manager rejects anything else
FILE_CATEGORIES: List[str] = [
    "HR Documents",
    "Tax Forms",
    "Contracts",
    "Performance Reviews",
    "Training Certificates",
    "Medical Records",
    "Other",
]

# Sentinel accepted by report filters meaning "no filter"
FILTER_ALL: str = "all"

# --- Compliance Configuration ---

# Days after which the latest submission for a category counts as overdue
COMPLIANCE_GRACE_DAYS: int = int(os.getenv("COMPLIANCE_GRACE_DAYS", "30"))

# Number of files shown in the dashboard's recent activity list
DASHBOARD_RECENT_LIMIT: int = 5

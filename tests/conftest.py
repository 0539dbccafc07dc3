"""Test environment: in-memory SQLite and cheap bcrypt, set before app modules load settings."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DEFAULT_ROLE_SLUG"] = "staff"
os.environ["LOG_LEVEL"] = "WARNING"

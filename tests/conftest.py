"""Test environment: in-memory SQLite and cheap bcrypt. Set before jobmonitor is imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-signing-secret-for-jobmonitor-unit-tests-0123456789abcdef-0123"
os.environ["JWT_ALGORITHM"] = "HS512"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_DEMO_USERS"] = "false"
os.environ["TOKEN_SWEEP_INTERVAL_MINUTES"] = "0"
os.environ["CORS_ORIGINS"] = ""

"""
1Code Core Configuration
Store connections, execution service and cache settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "onecode_db")

# Redis (secondary store, cache only)
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD") or None
REDIS_DB = int(os.getenv("REDIS_DB", "0"))

# Code execution service (one sub-route per language)
COMPILER_URL = os.getenv("COMPILER_URL", "https://core-compiler-rlqlgeshoq-el.a.run.app")
COMPILER_TIMEOUT_SECONDS = float(os.getenv("COMPILER_TIMEOUT_SECONDS", "30"))

COMPILER_ROUTES = {
    "Python": "compile_py",
    "C++": "compile_cpp",
}

# Error envelopes carry hint/details only in development
DEV_MODE = os.getenv("DEV_MODE", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ==================== CACHE TTLs ====================

ONE_DAY_SECONDS = 86400
FIVE_MINUTES_SECONDS = 300

EXERCISE_TESTS_TTL = ONE_DAY_SECONDS
TOTAL_POINTS_TTL = ONE_DAY_SECONDS
TRACK_EXERCISE_COUNT_TTL = ONE_DAY_SECONDS
TRACK_PROGRESS_TTL = ONE_DAY_SECONDS
STREAK_TTL = ONE_DAY_SECONDS
SOLVED_COUNT_TTL = FIVE_MINUTES_SECONDS
PROFILE_CREATED_TTL = FIVE_MINUTES_SECONDS

# Precomputed leaderboard blobs (written by an external job)
GLOBAL_LEADERBOARD_KEY = "globalTop20"
WEEKLY_LEADERBOARD_KEY = "weeklyTop20"

# Fetch limit for track listing
TRACKS_FETCH_LIMIT = 10

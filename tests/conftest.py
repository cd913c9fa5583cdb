# tests/conftest.py
import asyncio
import os
import sys

# Settings are read at import time, so these must be in place before the app is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["RATE_LIMIT_ENABLED"] = "false"

# Windows asyncio fix for pytest.
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import os

# ---------------- CONFIG ----------------
PORT = int(os.getenv("TODOS_PORT", "3000"))
HOST = os.getenv("TODOS_HOST", "0.0.0.0")

DB_FILE = os.getenv("TODOS_FILE", "todos.json")
LOG_FILE = os.getenv("TODOS_LOG_FILE", "logs.txt")

# comma separated, "*" for any origin
CORS_ORIGINS = [o.strip() for o in os.getenv("TODOS_CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("TODOS_LOG_LEVEL", "INFO").upper()

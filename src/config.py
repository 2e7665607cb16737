import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()

DB_USERNAME = os.getenv("DB_USERNAME", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_CLUSTER = os.getenv("DB_CLUSTER", "")
DB_NAME = os.getenv("DB_NAME", "ecotrack")

# Atlas connection string, a full MONGODB_URI takes precedence (local mongod, CI)
MONGODB_URI = os.getenv(
    "MONGODB_URI",
    f"mongodb+srv://{quote_plus(DB_USERNAME)}:{quote_plus(DB_PASSWORD)}@{DB_CLUSTER}.c5kbqln.mongodb.net/"
    f"{DB_NAME}?retryWrites=true&w=majority",
)
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

# SERVER CONFIGURATION
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

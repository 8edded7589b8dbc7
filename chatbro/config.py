"""ChatBRO — environment configuration."""

import os

from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME = "chatbro"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

import os

SERVICE_NAME = "booking-service"

CHAT_SERVICE_URL = os.getenv("CHAT_SERVICE_URL") or "http://chat-service:8000"
USER_SERVICE_URL = os.getenv("USER_SERVICE_URL") or "http://user-service:8000"

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT") or "3.0")

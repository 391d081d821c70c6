SERVICE_NAME = "chat-service"

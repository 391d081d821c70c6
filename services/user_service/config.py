SERVICE_NAME = "user-service"

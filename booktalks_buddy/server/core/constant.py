"""Static application constants shared by the app factory and routers."""

PROJECT_NAME = "BookTalks Buddy API"
VERSION = "0.1.0"
SCHEMA_VERSION = "v1"
API_V1_STR = "/api/v1"

from decouple import config

VERSION = "0.3.0"

DEBUG = config("DEBUG", default=False, cast=bool)

SERVICE_NAME = config("SERVICE_NAME", default="portal")

LOG_LEVEL = config("LOG_LEVEL", default="DEBUG" if DEBUG else "INFO")

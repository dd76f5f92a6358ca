"""Canonical logging field names for request dispatch logs.

Keeping names centralized keeps JSON log lines stable for anything that
indexes them.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"

# Request/response fields.
HTTP_METHOD = "http_method"
URL = "url"
STATUS_CODE = "status_code"
ERROR_KIND = "error_kind"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"

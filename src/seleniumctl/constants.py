"""Global constants for seleniumctl."""

# Remote store

RELEASE_BASE_URL = "https://selenium-release.storage.googleapis.com"
LISTING_URL = f"{RELEASE_BASE_URL}/"

ARTIFACT_PREFIX = "selenium-server-standalone-"
ARTIFACT_SUFFIX = ".jar"

# Sentinel accepted wherever a version is expected
LATEST = "latest"

# Launch

JAVA_EXECUTABLE = "java"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4444
DEFAULT_TIMEOUT = 30.0

# Readiness polling

POLL_INTERVAL = 0.25
CONNECT_TIMEOUT = 0.5

# HTTP

HTTP_TIMEOUT = 60.0
DOWNLOAD_CHUNK_SIZE = 64 * 1024
PROXY_ENV_VARS = ("http_proxy", "HTTP_PROXY")

import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "proxy-tab")
BASE_PATH = os.environ.get("BASE_PATH", "").rstrip("/")
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3000"))

# Metadata lookups degrade gracefully, so they get the shorter budget
META_TIMEOUT = float(os.getenv("META_TIMEOUT", "10"))
ASSET_TIMEOUT = float(os.getenv("ASSET_TIMEOUT", "20"))
PAGE_TIMEOUT = float(os.getenv("PAGE_TIMEOUT", "20"))

UPSTREAM_USER_AGENT = os.getenv(
    "UPSTREAM_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
)

SHOW_BANNER = os.getenv("SHOW_BANNER", "true").lower() == "true"
BANNER_TEXT = os.getenv("BANNER_TEXT", "Proxied via Proxy Tab")

STATIC_DIR = os.getenv("STATIC_DIR", "public")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS", "true").lower() == "true"

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")

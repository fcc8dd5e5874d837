import os

from dotenv import load_dotenv

load_dotenv()

if os.getenv("GEARSCAN_CATALOG_URL", "").strip() == "":
    os.environ.pop("GEARSCAN_CATALOG_URL", None)

CATALOG_URL = os.getenv("GEARSCAN_CATALOG_URL", None) or None
CATALOG_DIR = os.getenv("GEARSCAN_CATALOG_DIR", "").strip() or None
DEFAULT_GAME = os.getenv("GEARSCAN_DEFAULT_GAME", "hsr").strip().lower() or "hsr"

CONTACT_EMAIL = os.getenv("GEARSCAN_CONTACT_EMAIL", "you@example.com")
USER_AGENT = f"gearscan/1.0 ({CONTACT_EMAIL})"

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
PACKAGED_CATALOG_DIR = os.path.join(PACKAGE_DIR, "data")
SCHEMA_PATH = os.path.join(PACKAGE_DIR, "schemas", "gear-item.schema.json")

DATA_DIR = os.path.join("data", "v1", "gear")
FAILURES_PATH = os.path.join("data", "v1", "tmp", "failures.txt")
REQUEST_TIMEOUT_SECONDS = 30
RATE_LIMIT_SECONDS = 0.7

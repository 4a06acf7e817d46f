import os
import sys

import pytest


# Ensure `src/backend` is on sys.path so imports like `import pipelines...` work,
# even when pytest's rootdir is the repository root (pyproject pytest settings).
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)


# Config modules call load_dotenv() on import; a developer .env must not leak into tests.
_CONFIG_ENV_VARS = (
    "ACE_API_BASE_URL",
    "ACE_API_TOKEN",
    "ACE_API_TIMEOUT_SECONDS",
    "ACE_API_MAX_RETRIES",
    "TABLE_FIELD_ID_INTERNAL",
    "TABLE_FIELD_ID_EXTERNAL",
    "OBJECT_ID_DEPARTMENT",
    "OBJECT_ID_PROJECT",
    "OBJECT_ID_SUPPLIER",
    "OBJECT_ID_RECEIVING",
    "OBJECT_ID_BILL_TO",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SENDER_NAME",
    "DISPATCH_RECIPIENTS",
    "DOCUMENT_LOGO_PATH",
)


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch):
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

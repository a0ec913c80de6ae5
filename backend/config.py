import os
import logging
from typing import Optional

from dotenv import load_dotenv

from compliance.types import LegalLimits

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Environment variable -> LegalLimits field
LIMIT_ENV_VARS = {
    "PHARMA_WEEKLY_REST_HOURS": ("weekly_rest_hours", float),
    "PHARMA_MAX_DAILY_HOURS": ("max_daily_hours", float),
    "PHARMA_MAX_WEEKLY_HOURS": ("max_weekly_hours", float),
    "PHARMA_MIN_DAILY_REST_HOURS": ("min_daily_rest_hours", float),
    "PHARMA_MIN_PHARMACISTS": ("min_pharmacists", int),
}

_logging_configured = False


def setup_logging():
    global _logging_configured
    if _logging_configured:
        return

    logger = logging.getLogger()
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        console = logging.StreamHandler()
        console.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        console.setFormatter(logging.Formatter('%(name)-12s: %(levelname)-8s %(message)s'))
        logger.addHandler(console)

    _logging_configured = True


def load_limits(**overrides: Optional[float]) -> LegalLimits:
    """
    Build the legal limits in effect for a request.

    Keyword overrides (typically query parameters) win over the PHARMA_*
    environment variables, which win over the statutory defaults. None
    values are ignored at every level.

    Raises:
        ValueError: If an environment variable is not a number
    """
    from_env = {}
    for var, (field_name, cast) in LIMIT_ENV_VARS.items():
        raw = os.getenv(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            from_env[field_name] = cast(raw)
        except ValueError:
            raise ValueError(f"{var} must be a number, got {raw!r}")

    return LegalLimits().with_overrides(**from_env).with_overrides(**overrides)

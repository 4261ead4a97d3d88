# salon_api/config.py

import os
import warnings

from dotenv import load_dotenv

load_dotenv()

# SQLite database (file-based) unless overridden
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "change-me-later"

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Calendar dates and HH:MM times are wall-clock values in this zone
SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "Europe/Paris")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Insert the default formulas on startup when the catalog is empty
SEED_FORMULAS = os.getenv("SEED_FORMULAS", "true").lower() in ("1", "true", "yes")

# src/config/settings.py

"""Central configuration for the vendor marketplace."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the vendor marketplace."""

    # --- Backend connection ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # --- Backend collections ---
    PRODUCTS_TABLE: str = os.getenv("PRODUCTS_TABLE", "products")
    PHOTOS_TABLE: str = os.getenv("PHOTOS_TABLE", "product_photos")
    PHOTO_BUCKET: str = os.getenv("PHOTO_BUCKET", "product_photos")

    # --- Health check ---
    HEALTH_TIMEOUT: int = 10            # Seconds per endpoint check
    HEALTH_SLOW_MS: float = 5000.0      # Latency above this is "slow"
    HEALTH_ENDPOINTS: dict[str, str] = {
        "rest": "/rest/v1/",
        "auth": "/auth/v1/health",
        "storage": "/storage/v1/bucket",
    }

    # --- Access control ---
    VENDOR_CAPABILITY: str = "vendor"
    ADMIN_CAPABILITY: str = "admin"

    # --- Routes ---
    HOME_ROUTE: str = "/"
    LOGIN_ROUTE: str = "/auth"
    ADMIN_LOGIN_ROUTE: str = "/admin/auth"
    DASHBOARD_ROUTE: str = "/dashboard"
    ADMIN_ROUTE: str = "/admin"

    # --- Display ---
    CURRENCY_SYMBOL: str = "₹"
    MARKETPLACE_NAME: str = "Mateng Marketplace"

    # --- Product form ---
    RANDOM_NAME_LENGTH: int = 11        # Random photo filename stem

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

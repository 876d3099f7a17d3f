"""Configuration for the appointment scheduling core.

All business constants centralized here - override through environment
variables (or a .env file) without touching code.
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def get_int_env(name: str, default: int) -> int:
    """
    Read an integer setting from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or blank

    Returns:
        Parsed integer

    Raises:
        ValueError: If the variable is set but not an integer
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def get_optional_env(name: str) -> Optional[str]:
    """Read a string setting, treating blank values as unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


# API Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api").rstrip("/")
API_TIMEOUT_SECONDS = get_int_env("API_TIMEOUT_SECONDS", 15)
API_MAX_RETRIES = get_int_env("API_MAX_RETRIES", 2)

# Circuit breaker
CIRCUIT_FAILURE_THRESHOLD = get_int_env("CIRCUIT_FAILURE_THRESHOLD", 5)
CIRCUIT_RESET_SECONDS = get_int_env("CIRCUIT_RESET_SECONDS", 60)

# Booking window
SAME_DAY_CUTOFF_HOUR = get_int_env("SAME_DAY_CUTOFF_HOUR", 23)
BOOKING_HORIZON_DAYS = get_int_env("BOOKING_HORIZON_DAYS", 30)
CLINIC_TIMEZONE = get_optional_env("CLINIC_TIMEZONE")

# Draft validation
MAX_APPOINTMENT_HOURS = get_int_env("MAX_APPOINTMENT_HOURS", 8)
MAX_SYMPTOMS_LENGTH = get_int_env("MAX_SYMPTOMS_LENGTH", 500)

# Payments (amount in the smallest currency unit: 50000 paise = 500 INR)
APPOINTMENT_FEE = get_int_env("APPOINTMENT_FEE", 50000)
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "INR")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

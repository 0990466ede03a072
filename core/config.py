"""
Centralized configuration for the challenge platform.

Provides environment-aware settings shared by main.py, the web API
and the archival scheduler.
"""

import os

UNKNOWN_BLOCK_TYPE_POLICIES = ("fail", "skip")


def is_dev_mode() -> bool:
    """Check if running in development mode (--dev flag or DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def is_production() -> bool:
    """Check if running on Railway (production environment)."""
    return bool(os.environ.get("RAILWAY_ENVIRONMENT"))


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_frontend_url() -> str:
    """Get frontend URL based on mode."""
    if is_dev_mode():
        return os.environ.get("FRONTEND_URL", "http://localhost:3000").rstrip("/")
    return os.environ.get("FRONTEND_URL", f"http://localhost:{get_api_port()}")


def get_allowed_origins() -> list[str]:
    """
    Get list of allowed CORS origins.

    Includes localhost variants for dev and the production frontend URL.
    """
    hosts = ["localhost", "127.0.0.1"]
    ports = [3000, get_api_port()]
    origins = [f"http://{host}:{port}" for host in hosts for port in ports]

    frontend_url = get_frontend_url()
    if frontend_url not in origins:
        origins.append(frontend_url)

    return origins


def get_unknown_block_type_policy() -> str:
    """
    What to do with stored blocks whose type is no longer registered.

    "fail" (default) rejects the whole document; "skip" drops those blocks
    and logs a warning.
    """
    policy = os.getenv("UNKNOWN_BLOCK_TYPE_POLICY", "fail").lower()
    if policy not in UNKNOWN_BLOCK_TYPE_POLICIES:
        raise ValueError(
            f"UNKNOWN_BLOCK_TYPE_POLICY must be one of {UNKNOWN_BLOCK_TYPE_POLICIES}, "
            f"got {policy!r}"
        )
    return policy


def get_archive_sweep_minutes() -> int:
    """Interval between archival sweeps."""
    return int(os.getenv("ARCHIVE_SWEEP_MINUTES", "15"))


def get_cron_secret() -> str | None:
    """Bearer secret for the cron endpoint (unset = endpoint is open)."""
    return os.environ.get("CRON_SECRET") or None


# Required environment variables for production
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("JWT_SECRET", "Secret key for session and impersonation cookies", True),
    ("CRON_SECRET", "Bearer secret for the archive cron endpoint", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        value = os.environ.get(name)

        if not value:
            if is_production():
                errors.append(f"  ✗ {name}: Not set ({description})")
            elif required_in_dev or not in_dev:
                warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings

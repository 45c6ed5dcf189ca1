"""Runtime settings, read from the environment (and an optional .env file)."""
import os

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


# Assumed average travel speed used to turn distance into time.
DEFAULT_SPEED_KMH: float = _float_env("SUNROUTE_SPEED_KMH", 50.0)

OSRM_URL: str = os.getenv("SUNROUTE_OSRM_URL", "https://router.project-osrm.org")
NOMINATIM_URL: str = os.getenv(
    "SUNROUTE_NOMINATIM_URL", "https://nominatim.openstreetmap.org"
)
# Nominatim's usage policy requires an identifying User-Agent.
USER_AGENT: str = os.getenv("SUNROUTE_USER_AGENT", "SunRouteApp/1.0")

HTTP_TIMEOUT: float = _float_env("SUNROUTE_HTTP_TIMEOUT", 10.0)
SEARCH_TIMEOUT: float = _float_env("SUNROUTE_SEARCH_TIMEOUT", 5.0)

"""Internal constants shared across the library."""

BASE_URL = "http://192.168.17.17:8087"
IP_GEOLOCATION_URL = "https://ipapi.co/json/"
USER_AGENT = "pyelangdf"
SETTINGS_FILE_NAME = "elangdf-config.json"

# ------------------------------------------------------------------
# DF sweep payload layout  (GET /df, comma separated)
# ------------------------------------------------------------------

DF_MIN_FIELDS = 377
DF_FIELD_TIMESTAMP = 0
DF_FIELD_HEADING = 1
DF_FIELD_CONFIDENCE = 2
DF_FIELD_POWER = 3
DF_POLAR_START = 17
DF_POLAR_END = 377
POLAR_SAMPLES = DF_POLAR_END - DF_POLAR_START  # 360

# ------------------------------------------------------------------
# Location trust
# ------------------------------------------------------------------

#: Hardware fixes reporting a worse accuracy (metres) are not trusted.
ACCURACY_THRESHOLD_M = 100.0
#: Accuracy attached to IP geolocation fixes.
IP_FALLBACK_ACCURACY_M = 5000.0

GPSD_HOST = "127.0.0.1"
GPSD_PORT = 2947

# ------------------------------------------------------------------
# Antenna bands  (GET /api/ant/{band})
# ------------------------------------------------------------------

UHF_MAX_SPACING_M = 0.25

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_UDP_PORT = 8080
UDP_MAX_NUMBER = 1_000_000

NO_NEW_DATA_MESSAGE = "No new data available"


def antenna_band(ant_spacing_meters: float) -> str:
    """Return the antenna band (``"uhf"`` or ``"vhf"``) for an element spacing."""
    return "uhf" if float(ant_spacing_meters) <= UHF_MAX_SPACING_M else "vhf"

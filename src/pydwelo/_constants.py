"""Internal constants shared across the library."""

BASE_URL = "https://api.dwelo.com"
USER_AGENT = "pydwelo"

#: Page size used when listing gateway devices; the API caps it well above
#: any real gateway.
DEVICE_LIST_LIMIT = 5000

# ------------------------------------------------------------------
# Sensor readings
# ------------------------------------------------------------------

SENSOR_LOCK = "lock"
SENSOR_BATTERY = "battery"
LOCKED_VALUE = "locked"

#: Battery percentage at or below which the lock reports low battery.
LOW_BATTERY_THRESHOLD = 20

# ------------------------------------------------------------------
# Command payloads
# ------------------------------------------------------------------

COMMAND_LOCK = "lock"
COMMAND_UNLOCK = "unlock"
COMMAND_ON = "on"
COMMAND_OFF = "off"

#: Watchdog window, in poll intervals, before an unconfirmed command is abandoned.
WATCHDOG_POLL_FACTOR = 2

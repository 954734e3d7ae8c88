"""Internal constants shared across the library."""

USER_AGENT = "pygarage"
CLIENT_INFO = "pygarage-py"

REST_PREFIX = "/rest/v1"
AUTH_PREFIX = "/auth/v1"

VEHICLES_TABLE = "vehicles"
LINKS_TABLE = "users_vehicles"

# PostgREST "Prefer" header values.
RETURN_REPRESENTATION = "return=representation"
RETURN_MINIMAL = "return=minimal"

# Characters that force a value to be double-quoted inside an ``in.(...)`` list.
POSTGREST_RESERVED_CHARS = frozenset(',.:()"\\ ')

DEFAULT_IMAGE_URI = "/default-car.jpg"
VEHICLE_ADDED_MESSAGE = "Vehicle successfully added!"

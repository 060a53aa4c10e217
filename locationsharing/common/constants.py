"""Application constants."""

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0 Safari/537.36"
)
REQUIRED_COOKIE_NAMES = ("__Secure-1PSID", "__Secure-3PSID")

# Map-rendering parameter sent with every read. It only describes a map tile
# (fixed on a headquarters viewport) and has no bearing on the shared people.
MAP_RENDER_PB = (
    "!1m7!8m6!1m3!1i14!2i8413!3i5385!2i6!3x4095"
    "!2m3!1e0!2sm!3i407105169!3m7!2sen!5e1105!12m4"
    "!1e68!2m2!1sset!2sRoadmap!4e1!5m4!1e4!8m2!1e0!"
    "1e1!6m9!1e12!2i2!26m1!4b1!30m1!"
    "1f1.3953487873077393!39b1!44e1!50e0!23i4111425"
)

# Top-level payload offsets.
SHARED_PEOPLE_OFFSET = 0
SESSION_FIELD_OFFSET = 6
SELF_SLOT_OFFSET = 9

# Observed (undocumented) value returned to unauthenticated requesters in the
# session field.
UNAUTHENTICATED_SENTINEL = "GgA="

EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "event",
    "status",
    "path",
    "error_code",
    "shared_count",
    "has_self",
    "duration_ms",
    "message",
)

"""Environment-driven defaults for the syllabus calendar tools."""
import os


# Length of a timed event when the syllabus gives only a start time
DEFAULT_DURATION_MINUTES = float(os.getenv("SYLLABUS_DEFAULT_DURATION_MINUTES", "60"))

# Time of day ("HH:MM", 24h) given to deadlines that name no time; empty disables it
DEFAULT_DEADLINE_TIME = os.getenv("SYLLABUS_DEFAULT_TIME", "23:59")

DEFAULT_CALENDAR_NAME = os.getenv("SYLLABUS_CALENDAR_NAME", "Syllabus")

FALLBACK_TITLE = "Course Event"

SERVICE_HOST = os.getenv("SYLLABUS_SERVICE_HOST", "0.0.0.0")
SERVICE_PORT = int(os.getenv("SYLLABUS_SERVICE_PORT", "8001"))

"""Word mastery status constants."""

from typing import Literal

WordStatus = Literal["new", "mastered", "review", "forgot"]

STATUS_NEW = "new"
STATUS_MASTERED = "mastered"
STATUS_REVIEW = "review"
STATUS_FORGOT = "forgot"

# Display order used by stats and listings
VALID_STATUSES: tuple[str, ...] = (STATUS_NEW, STATUS_REVIEW, STATUS_FORGOT, STATUS_MASTERED)

DEFAULT_STATUS = STATUS_NEW

"""Session validity check on a decoded top-level payload."""

from __future__ import annotations

import logging
from typing import Any

from locationsharing.common.constants import SESSION_FIELD_OFFSET, UNAUTHENTICATED_SENTINEL
from locationsharing.common.errors import MissingFieldError, SessionExpiredError
from locationsharing.decode.view import JsonArrayView, as_view

logger = logging.getLogger(__name__)


def validate_session(top: JsonArrayView | Any) -> None:
    """Raise unless the payload looks like it was served to a signed-in session.

    This is a heuristic: the backend places ``"GgA="`` in the session field
    when the request carried no valid authentication. Nothing documents that
    value, so a provider-side change can make this check pass or fail wrongly.
    """
    top = as_view(top, "data")
    path = top.child_path(SESSION_FIELD_OFFSET)
    value = top.at(SESSION_FIELD_OFFSET)
    if not isinstance(value, str) or not value:
        raise MissingFieldError(path)
    if value == UNAUTHENTICATED_SENTINEL:
        raise SessionExpiredError(path)
    logger.debug("session field at %s looks authenticated", path)

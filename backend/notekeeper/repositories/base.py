# notekeeper/repositories/base.py
import logging
from contextlib import contextmanager

from tortoise.exceptions import ValidationError

from notekeeper.core.errors import BadRequestError

logger = logging.getLogger("uvicorn.error")


@contextmanager
def field_validation_as_bad_request():
    """Turn a Tortoise field validation failure into a 400 for the caller."""
    try:
        yield
    except ValidationError as exc:
        logger.info("[repositories] rejected field value: %s", str(exc)[:200])
        raise BadRequestError("Invalid field value")

"""Helpers shared by the ninja routers."""
from pydantic import ValidationError
from ninja.errors import ValidationError as NinjaValidationError


def parse_json_payload(parse, raw):
    """
    Run a pydantic JSON parser over a multipart field or raw body; a
    validation failure becomes ninja's 422 response.
    """
    try:
        return parse(raw)
    except ValidationError as e:
        raise NinjaValidationError(e.errors(include_url=False, include_context=False, include_input=False))

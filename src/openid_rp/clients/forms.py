from __future__ import annotations

from typing import List, Tuple
from urllib.parse import parse_qsl

from starlette.requests import Request

from openid_rp.errors import FormParseError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def callback_params(request: Request) -> List[Tuple[str, str]]:
    """Collect the provider's assertion from a callback request.

    Query string pairs come first, followed by the pairs of a urlencoded
    POST body. Duplicate keys are kept in order.
    """
    pairs = list(request.query_params.multi_items())

    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if request.method == "POST" and content_type == FORM_CONTENT_TYPE:
        body = await request.body()
        pairs.extend(parse_form(body))
    return pairs


def parse_form(body: bytes) -> List[Tuple[str, str]]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormParseError("Callback body is not valid UTF-8", description=str(exc)) from exc
    if not text.strip():
        return []
    try:
        return parse_qsl(text, keep_blank_values=True, strict_parsing=True)
    except ValueError as exc:
        raise FormParseError("Malformed callback form body", description=str(exc)) from exc

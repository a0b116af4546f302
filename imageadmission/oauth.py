"""Fetching OAuth tokens from a registry's OAuth service."""

import json
import logging
import re
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import requests
from requests.adapters import HTTPAdapter

log = logging.getLogger(__name__)

_CONNECT_TIMEOUT = 5.0
_READ_TIMEOUT = 600.0

_session = requests.Session()
_adapter = HTTPAdapter(pool_maxsize=10)
_session.mount("https://", _adapter)
_session.mount("http://", _adapter)

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


class OAuthError(Exception):
    """Raised when a token cannot be obtained from the OAuth service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class TokenResponse:
    """A generic OAuth2 token response."""

    token: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_in: int = 0
    issued_at: Optional[datetime] = None


def _unmarshal_error(reason: Any) -> OAuthError:
    return OAuthError(f"Failed to unmarshall OAuth response: {reason}")


def _parse_time(value: str) -> datetime:
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise _unmarshal_error(f"cannot parse {value!r} as RFC 3339 time")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "")[:6].ljust(6, "0"))
    if zone == "Z":
        tzinfo = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tzinfo = timezone(sign * offset)
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second),
            microsecond, tzinfo=tzinfo,
        )
    except ValueError as exc:
        raise _unmarshal_error(exc) from exc


_FIELDS = {field.name: field.name for field in fields(TokenResponse)}


def _field_for(key: str) -> Optional[str]:
    if key in _FIELDS:
        return key
    return _FIELDS.get(key.lower())


def parse_token_response(data: Union[bytes, str]) -> TokenResponse:
    """Decode a JSON token response; unknown keys are ignored."""
    try:
        raw = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise _unmarshal_error(exc) from exc

    response = TokenResponse()
    if raw is None:
        return response
    if not isinstance(raw, dict):
        raise _unmarshal_error(f"cannot unmarshal {type(raw).__name__} into a token response")

    for key, value in raw.items():
        name = _field_for(key)
        if name is None or value is None:
            continue
        if name == "expires_in":
            if isinstance(value, bool) or not isinstance(value, int):
                raise _unmarshal_error(f"cannot unmarshal {value!r} into field expires_in")
            response.expires_in = value
        elif name == "issued_at":
            if not isinstance(value, str):
                raise _unmarshal_error(f"cannot unmarshal {value!r} into field issued_at")
            response.issued_at = _parse_time(value)
        else:
            if not isinstance(value, str):
                raise _unmarshal_error(f"cannot unmarshal {value!r} into field {name}")
            setattr(response, name, value)
    return response


def request_token(
    token: str,
    repo: str,
    username: str,
    write_access_required: bool,
    service: str,
    hostname: str,
) -> TokenResponse:
    """Ask the OAuth service at ``hostname`` for a token giving access to ``repo``.

    ``username`` names the kind of credential in ``token`` (for example
    ``token``, ``iambearer`` or ``iamapikey``); ``service`` is the service the
    token is for, such as ``notary`` or ``registry``.
    """
    actions = "pull,push,*" if write_access_required else "pull"
    form = [
        ("client_id", "testclient"),
        ("grant_type", "password"),
        ("password", token),
        ("scope", f"repository:{repo}:{actions}"),
        ("service", service),
        ("username", username),
    ]

    try:
        response = _session.post(
            hostname + "/oauth/token",
            data=form,
            timeout=(_CONNECT_TIMEOUT, _READ_TIMEOUT),
        )
    except requests.RequestException as exc:
        log.error("Error sending request to registry-oauth: %s", exc)
        raise OAuthError(f"Error sending request to registry-oauth: {exc}") from exc

    if not 200 <= response.status_code < 300:
        log.error("Received non-success status code %s", response.status_code)
        raise OAuthError(
            f"Request to OAuth failed with status code: {response.status_code} "
            f"and body: {response.text}",
            status_code=response.status_code,
        )

    return parse_token_response(response.content)
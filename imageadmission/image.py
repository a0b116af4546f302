"""Parsing of container image references."""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .trustmap import TRUST_SERVER_MAP

_NAME_TOTAL_LENGTH_MAX = 255

_ALPHA_NUMERIC = r"[a-z0-9]+"
_NAME_COMPONENT = rf"{_ALPHA_NUMERIC}(?:(?:[._]|__|-+){_ALPHA_NUMERIC})*"
_HOST_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_HOSTNAME = rf"{_HOST_COMPONENT}(?:\.{_HOST_COMPONENT})*(?::[0-9]+)?"
_TAG = r"\w[\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"
_NAME = rf"(?:{_HOSTNAME}/)?{_NAME_COMPONENT}(?:/{_NAME_COMPONENT})*"

_REFERENCE_RE = re.compile(rf"({_NAME})(?::({_TAG}))?(?:@({_DIGEST}))?", re.ASCII)
_ANCHORED_NAME_RE = re.compile(
    rf"(?:({_HOSTNAME})/)?({_NAME_COMPONENT}(?:/{_NAME_COMPONENT})*)", re.ASCII
)

_DIGEST_SEPARATOR = "@sha256:"


class InvalidReferenceError(ValueError):
    """Raised when an image name cannot be parsed."""


class NoTrustServerError(LookupError):
    """Raised when no content trust server is known for a registry."""


def _parse_named(text: str) -> Tuple[str, Optional[str]]:
    """Return the repository name and tag of a reference."""
    match = _REFERENCE_RE.fullmatch(text)
    if match is None:
        if not text:
            raise InvalidReferenceError("repository name must have at least one component")
        if _REFERENCE_RE.fullmatch(text.lower()):
            raise InvalidReferenceError("repository name must be lowercase")
        raise InvalidReferenceError("invalid reference format")
    name, tag, _digest = match.groups()
    if len(name) > _NAME_TOTAL_LENGTH_MAX:
        raise InvalidReferenceError(
            f"repository name must not be more than {_NAME_TOTAL_LENGTH_MAX} characters"
        )
    return name, tag


def _split_hostname(name: str) -> str:
    match = _ANCHORED_NAME_RE.fullmatch(name)
    if match is None:
        return ""
    return match.group(1) or ""


@dataclass(frozen=True)
class Reference:
    """A parsed image reference."""

    original: str
    name: str
    tag: str
    digest: str
    hostname: str
    port: str

    def has_ibm_repo(self) -> bool:
        """Return True if the image lives in an IBM registry."""
        if self.hostname.startswith("registry") and self.hostname.endswith(".bluemix.net"):
            return True
        return self.hostname.endswith("icr.io")

    def registry_url(self) -> str:
        """Return the HTTPS URL of the registry."""
        port = f":{self.port}" if self.port else ""
        return f"https://{self.hostname}{port}"

    def content_trust_url(self) -> str:
        """Return the URL of the content trust server for the registry."""
        output = ""
        for registry, trust_server in TRUST_SERVER_MAP.items():
            if self.hostname.endswith(registry):
                output = trust_server(registry, self.hostname)
        if not output:
            raise NoTrustServerError("no trust server could be found")
        return output

    def name_with_tag(self) -> str:
        """Return the image name followed by its tag."""
        return f"{self.name}:{self.tag}"

    def __str__(self) -> str:
        return self.original


def parse_reference(name: str) -> Reference:
    """Parse an image name, raising InvalidReferenceError if it is not valid."""
    original = name
    digest = ""
    if _DIGEST_SEPARATOR in name:
        fields = name.split(_DIGEST_SEPARATOR)
        name, digest = fields[0], fields[1]

    repository, _ = _parse_named(name)

    hostname = _split_hostname(repository)
    if not hostname or "." not in hostname:
        hostname = "docker.io"
    host, _, port = hostname.partition(":")

    if ":" not in name.replace(hostname, "", 1):
        name += ":latest"

    repository, tag = _parse_named(name)
    if tag is None:
        raise InvalidReferenceError(f"reference {original} has no tag")

    return Reference(
        original=original,
        name=repository,
        tag=tag,
        digest=digest,
        hostname=host,
        port=port,
    )
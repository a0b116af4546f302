"""Known registries and the content trust servers that sponsor them."""

from typing import Callable, Dict

TrustServerFn = Callable[[str, str], str]


def identity(value: str) -> TrustServerFn:
    """Return a trust server function that always yields ``value``."""

    def trust_server(registry_hostname: str, image_hostname: str) -> str:
        return value

    return trust_server


def ibm_regional(registry_hostname: str, image_hostname: str) -> str:
    """Trust server for a regional bluemix.net registry."""
    return "https://" + image_hostname.removesuffix(registry_hostname) + "bluemix.net:4443"


def icr_regional(registry_hostname: str, image_hostname: str) -> str:
    """Trust server for a regional icr.io registry."""
    return "https://" + image_hostname.removesuffix(registry_hostname) + "icr.io:4443"


TRUST_SERVER_MAP: Dict[str, TrustServerFn] = {
    "docker.io": identity("https://notary.docker.io"),
    "quay.io": identity("https://quay.io:443"),
    "bluemix.net": ibm_regional,
    "icr.io": icr_regional,
}
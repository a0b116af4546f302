import pytest

from imageadmission.image import (
    InvalidReferenceError,
    NoTrustServerError,
    Reference,
    parse_reference,
)

CASES = [
    pytest.param(
        "test.com/namespace/name",
        dict(
            hostname="test.com", port="", has_ibm=False, tag="latest", digest="",
            name_with_tag="test.com/namespace/name:latest",
            name="test.com/namespace/name", string="test.com/namespace/name",
            registry_url="https://test.com", trust_url=None,
        ),
        id="image without a tag",
    ),
    pytest.param(
        "test.com:8080/namespace/name@sha256:1234567890",
        dict(
            hostname="test.com", port="8080", has_ibm=False, tag="latest", digest="1234567890",
            name_with_tag="test.com:8080/namespace/name:latest",
            name="test.com:8080/namespace/name",
            string="test.com:8080/namespace/name@sha256:1234567890",
            registry_url="https://test.com:8080", trust_url=None,
        ),
        id="image with a digest",
    ),
    pytest.param(
        "test.com/namespace/name:v1",
        dict(
            hostname="test.com", port="", has_ibm=False, tag="v1", digest="",
            name_with_tag="test.com/namespace/name:v1",
            name="test.com/namespace/name", string="test.com/namespace/name:v1",
            registry_url="https://test.com", trust_url=None,
        ),
        id="image with a tag",
    ),
    pytest.param(
        "test.com:8080/namespace/name:v1@sha256:1234567890",
        dict(
            hostname="test.com", port="8080", has_ibm=False, tag="v1", digest="1234567890",
            name_with_tag="test.com:8080/namespace/name:v1",
            name="test.com:8080/namespace/name",
            string="test.com:8080/namespace/name:v1@sha256:1234567890",
            registry_url="https://test.com:8080", trust_url=None,
        ),
        id="image with a tag and a digest",
    ),
    pytest.param(
        "namespace/name:v1@sha256:1234567890",
        dict(
            hostname="docker.io", port="", has_ibm=False, tag="v1", digest="1234567890",
            name_with_tag="namespace/name:v1", name="namespace/name",
            string="namespace/name:v1@sha256:1234567890",
            registry_url="https://docker.io", trust_url="https://notary.docker.io",
        ),
        id="docker hub image with a tag and a digest",
    ),
    pytest.param(
        "ubuntu:v1@sha256:1234567890",
        dict(
            hostname="docker.io", port="", has_ibm=False, tag="v1", digest="1234567890",
            name_with_tag="ubuntu:v1", name="ubuntu",
            string="ubuntu:v1@sha256:1234567890",
            registry_url="https://docker.io", trust_url="https://notary.docker.io",
        ),
        id="docker hub public image",
    ),
    pytest.param(
        "registry.ng.bluemix.net/namespace/name",
        dict(
            hostname="registry.ng.bluemix.net", port="", has_ibm=True, tag="latest", digest="",
            name_with_tag="registry.ng.bluemix.net/namespace/name:latest",
            name="registry.ng.bluemix.net/namespace/name",
            string="registry.ng.bluemix.net/namespace/name",
            registry_url="https://registry.ng.bluemix.net",
            trust_url="https://registry.ng.bluemix.net:4443",
        ),
        id="IBM image",
    ),
    pytest.param(
        "quay.io/namespace/name",
        dict(
            hostname="quay.io", port="", has_ibm=False, tag="latest", digest="",
            name_with_tag="quay.io/namespace/name:latest",
            name="quay.io/namespace/name", string="quay.io/namespace/name",
            registry_url="https://quay.io", trust_url="https://quay.io:443",
        ),
        id="quay.io image",
    ),
    pytest.param(
        "us.icr.io/namespace/name",
        dict(
            hostname="us.icr.io", port="", has_ibm=True, tag="latest", digest="",
            name_with_tag="us.icr.io/namespace/name:latest",
            name="us.icr.io/namespace/name", string="us.icr.io/namespace/name",
            registry_url="https://us.icr.io", trust_url="https://us.icr.io:4443",
        ),
        id="ICR image",
    ),
    pytest.param(
        "stg.icr.io/namespace/name",
        dict(
            hostname="stg.icr.io", port="", has_ibm=True, tag="latest", digest="",
            name_with_tag="stg.icr.io/namespace/name:latest",
            name="stg.icr.io/namespace/name", string="stg.icr.io/namespace/name",
            registry_url="https://stg.icr.io", trust_url="https://stg.icr.io:4443",
        ),
        id="staging ICR image",
    ),
    pytest.param(
        "de.icr.io:8080/namespace/name",
        dict(
            hostname="de.icr.io", port="8080", has_ibm=True, tag="latest", digest="",
            name_with_tag="de.icr.io:8080/namespace/name:latest",
            name="de.icr.io:8080/namespace/name", string="de.icr.io:8080/namespace/name",
            registry_url="https://de.icr.io:8080", trust_url="https://de.icr.io:4443",
        ),
        id="ICR image with a port",
    ),
]


@pytest.mark.parametrize(("text", "expect"), CASES)
def test_reference(text, expect):
    image = parse_reference(text)
    assert image.hostname == expect["hostname"]
    assert image.port == expect["port"]
    assert image.has_ibm_repo() is expect["has_ibm"]
    assert image.registry_url() == expect["registry_url"]
    if expect["trust_url"] is None:
        with pytest.raises(NoTrustServerError):
            image.content_trust_url()
    else:
        assert image.content_trust_url() == expect["trust_url"]
    assert image.tag == expect["tag"]
    assert image.digest == expect["digest"]
    assert image.name_with_tag() == expect["name_with_tag"]
    assert image.name == expect["name"]
    assert str(image) == expect["string"]


def test_invalid_input_raises():
    with pytest.raises(InvalidReferenceError):
        parse_reference("?")


def test_empty_input_raises():
    with pytest.raises(InvalidReferenceError):
        parse_reference("")


def test_uppercase_repository_raises():
    with pytest.raises(InvalidReferenceError, match="lowercase"):
        parse_reference("test.com/Namespace/name")


def test_overlong_name_raises():
    with pytest.raises(InvalidReferenceError):
        parse_reference("test.com/" + "a" * 256)


def test_hostname_without_dot_is_docker_hub():
    image = parse_reference("localhost/foo")
    assert image.hostname == "docker.io"
    assert image.name == "localhost/foo"
    assert image.tag == "latest"


def test_untaggable_reference_raises():
    with pytest.raises(InvalidReferenceError):
        parse_reference("localhost:5000/foo")


def test_reference_is_a_value():
    assert parse_reference("test.com/namespace/name:v1") == parse_reference("test.com/namespace/name:v1")
    assert isinstance(parse_reference("ubuntu"), Reference)
    assert parse_reference("ubuntu").name_with_tag() == "ubuntu:latest"
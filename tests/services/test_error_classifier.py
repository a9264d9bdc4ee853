import socket
import ssl

import pytest
import requests

from linkhealth.exceptions import HttpFetchError
from linkhealth.services.error_classifier import ErrorClassifier


@pytest.fixture
def classifier():
    return ErrorClassifier()


@pytest.mark.parametrize(
    "status,expected",
    [
        (404, "404"),
        (500, "500"),
        (503, "500"),
        (403, "forbidden"),
        (401, "unauthorized"),
        (400, "http_error"),
        (410, "http_error"),
        (429, "http_error"),
    ],
)
def test_classify_failing_status(classifier, status, expected):
    assert classifier.classify_status(status) == expected


@pytest.mark.parametrize("status", [200, 204, 301, 302, 399])
def test_success_and_redirect_status_are_not_failures(classifier, status):
    assert classifier.classify_status(status) is None


def test_timeout(classifier):
    assert classifier.classify_exception(requests.exceptions.ReadTimeout("read timed out")) == "timeout"
    assert classifier.classify_exception(requests.exceptions.ConnectTimeout("connect timed out")) == "timeout"


def test_timeout_wrapped_in_fetch_error(classifier):
    err = HttpFetchError("https://example.com/", requests.exceptions.Timeout("boom"))
    assert classifier.classify_exception(err) == "timeout"


def test_ssl_error(classifier):
    assert classifier.classify_exception(requests.exceptions.SSLError("bad handshake")) == "ssl_error"
    assert classifier.classify_exception(requests.exceptions.ConnectionError(ssl.SSLError(1, "tls"))) == "ssl_error"


def test_redirect_loop(classifier):
    assert classifier.classify_exception(requests.exceptions.TooManyRedirects("Exceeded 30 redirects.")) == "redirect_loop"


def test_dns_error_from_gaierror(classifier):
    err = requests.exceptions.ConnectionError(socket.gaierror(-2, "Name or service not known"))
    assert classifier.classify_exception(err) == "dns_error"


def test_dns_error_from_message(classifier):
    err = requests.exceptions.ConnectionError("Failed to resolve 'nope.invalid' ([Errno -2] Name or service not known)")
    assert classifier.classify_exception(err) == "dns_error"


def test_connection_refused(classifier):
    err = requests.exceptions.ConnectionError(ConnectionRefusedError(111, "Connection refused"))
    assert classifier.classify_exception(err) == "connection_refused"


def test_connection_refused_through_cause_chain(classifier):
    try:
        try:
            raise ConnectionRefusedError(111, "Connection refused")
        except ConnectionRefusedError as inner:
            raise requests.exceptions.ConnectionError("connection aborted") from inner
    except requests.exceptions.ConnectionError as e:
        assert classifier.classify_exception(e) == "connection_refused"


def test_anything_else_is_network_error(classifier):
    assert classifier.classify_exception(requests.exceptions.ConnectionError("Connection reset by peer")) == "network_error"
    assert classifier.classify_exception(RuntimeError("weird")) == "network_error"


def test_link_type(classifier):
    assert classifier.link_type("https://example.com/a", "example.com") == "internal"
    assert classifier.link_type("https://other.org/a", "example.com") == "external"

"""Tests for response classification and HttpResult."""

import pytest
from httpwrap import HttpResult, NetworkError, is_success


class TestIsSuccess:
    """Tests for is_success."""

    @pytest.mark.parametrize("status_code", [200, 201, 204, 250, 299])
    def test_2xx_is_success(self, status_code):
        """Test that every 2xx status is a success."""
        assert is_success(status_code) is True

    @pytest.mark.parametrize("status_code", [300, 301, 304, 400, 404, 500, 503])
    def test_300_and_above_is_failure(self, status_code):
        """Test that 300 and above are failures, including 3xx."""
        assert is_success(status_code) is False

    def test_transport_error_is_failure(self):
        """Test that a transport error fails even with a 2xx status."""
        assert is_success(200, error="connection reset") is False

    def test_no_response_is_failure(self):
        """Test that status 0 (no response) is a failure."""
        assert is_success(0) is False


class TestHttpResult:
    """Tests for HttpResult."""

    def test_success_unwrap_returns_body(self):
        """Test that unwrap returns the body unchanged on success."""
        result = HttpResult(method="GET", url="https://x", status_code=200, content=b"\x00\x01payload")
        assert result.ok is True
        assert result.unwrap() == b"\x00\x01payload"

    def test_failure_unwrap_raises_with_status_and_body(self):
        """Test that unwrap raises NetworkError carrying status and body."""
        result = HttpResult(method="GET", url="https://x", status_code=404, content=b"not found")
        with pytest.raises(NetworkError) as exc_info:
            result.unwrap()
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "not found"
        assert str(exc_info.value) == "not found"

    def test_transport_failure_message(self):
        """Test that transport failures report status 0 and the error text."""
        result = HttpResult(method="GET", url="https://x", status_code=0, error="Cannot connect to host")
        assert result.ok is False
        assert result.message == "Cannot connect to host"
        with pytest.raises(NetworkError) as exc_info:
            result.raise_for_status()
        assert exc_info.value.status_code == 0

    def test_text_uses_declared_charset(self):
        """Test that the Content-Type charset is honoured."""
        result = HttpResult(
            method="GET",
            url="https://x",
            status_code=200,
            content="café".encode("latin-1"),
            headers={"content-type": "text/plain; charset=latin-1"},
        )
        assert result.text() == "café"

    def test_text_falls_back_to_utf8(self):
        """Test that undeclared or bogus charsets fall back to UTF-8."""
        result = HttpResult(
            method="GET",
            url="https://x",
            status_code=200,
            content="café".encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=no-such-codec"},
        )
        assert result.text() == "café"

    def test_network_error_repr(self):
        """Test NetworkError repr."""
        error = NetworkError(500, "boom")
        assert repr(error) == "NetworkError(status_code=500, message='boom')"

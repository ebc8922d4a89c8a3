"""Tests for the httpwrap command-line interface."""

import io
from unittest.mock import MagicMock, patch

import pytest
from httpwrap import HttpResult, NetworkError
from httpwrap.cli import EXIT_OK, EXIT_REQUEST_FAILED, EXIT_USAGE, build_config, create_parser, main, parse_header
from PIL import Image


@pytest.fixture
def mock_client():
    """Patch BlockingHttpClient in the CLI with a mock."""
    client = MagicMock()
    client.__enter__.return_value = client
    with patch("httpwrap.cli.BlockingHttpClient", return_value=client) as client_cls, patch(
        "httpwrap.cli.setup_logging"
    ):
        client.cls = client_cls
        yield client


def make_png(width, height):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height)).save(buffer, format="PNG")
    return buffer.getvalue()


def ok_result(content=b"hello", status_code=200):
    return HttpResult(method="GET", url="https://example.com", status_code=status_code, content=content)


class TestParser:
    """Tests for argument parsing."""

    def test_method_is_case_insensitive(self):
        """Test that the method is upper-cased."""
        args = create_parser().parse_args(["post", "https://example.com"])
        assert args.method == "POST"

    def test_unknown_method_rejected(self):
        """Test that unsupported methods exit with a usage error."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["TRACE", "https://example.com"])

    def test_data_and_data_file_exclusive(self, tmp_path):
        """Test that only one body source can be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["POST", "https://x", "-d", "a", "--data-file", str(tmp_path / "f")])

    def test_parse_header(self):
        """Test 'Name: value' parsing."""
        assert parse_header("Content-Type: application/json") == ("Content-Type", "application/json")
        assert parse_header("X-Empty:") == ("X-Empty", "")
        with pytest.raises(ValueError):
            parse_header("no-colon")


class TestBuildConfig:
    """Tests for merging YAML config with flags."""

    def test_flags_override_yaml(self, tmp_path):
        """Test that command-line flags win over the config file."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text("headers:\n  Accept: text/plain\n  X-Team: core\ntimeout: 10\n")
        args = create_parser().parse_args(
            [
                "GET",
                "https://x",
                "-c",
                str(config_file),
                "-H",
                "accept: application/json",
                "-t",
                "2",
                "-b",
                "tok",
                "-v",
            ]
        )

        config = build_config(args)

        assert config.headers == {"X-Team": "core", "accept": "application/json"}
        assert config.timeout == 2
        assert config.bearer_token == "tok"
        assert config.log_level == "DEBUG"

    def test_log_level_option(self):
        """Test that --log-level sets the level and wins over -v."""
        args = create_parser().parse_args(["GET", "https://x", "--log-level", "WARNING", "-v"])
        assert build_config(args).log_level == "WARNING"

    def test_log_level_choices(self):
        """Test that unknown levels are rejected."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["GET", "https://x", "--log-level", "TRACE"])

    def test_log_level_reaches_setup_logging(self, mock_client, tmp_path):
        """Test that main() configures logging with the chosen level."""
        mock_client.request.return_value = ok_result()
        argv = ["GET", "https://example.com", "--log-level", "ERROR", "-o", str(tmp_path / "out")]
        with patch("httpwrap.cli.setup_logging") as setup:
            assert main(argv) == EXIT_OK
        assert setup.call_args.kwargs["level"] == "ERROR"


class TestMain:
    """Tests for running requests through main()."""

    def test_success_writes_body_to_stdout(self, mock_client, capsysbinary):
        """Test that the body goes to stdout and the exit code is 0."""
        mock_client.request.return_value = ok_result(b'{"id":1}', 201)

        code = main(["POST", "https://example.com/items", "-H", "Content-Type: application/json", "-d", "{}"])

        assert code == EXIT_OK
        assert capsysbinary.readouterr().out == b'{"id":1}'
        mock_client.request.assert_called_once_with("POST", "https://example.com/items", b"{}")
        config = mock_client.cls.call_args.args[0]
        assert config.headers == {"Content-Type": "application/json"}

    def test_http_failure_exit_code(self, mock_client, capsys):
        """Test that a failed request exits with 1 and reports the status."""
        mock_client.request.return_value = HttpResult(
            method="GET", url="https://example.com", status_code=404, content=b"not found"
        )

        code = main(["GET", "https://example.com/missing"])

        assert code == EXIT_REQUEST_FAILED
        err = capsys.readouterr().err
        assert "404" in err
        assert "not found" in err

    def test_output_file(self, mock_client, tmp_path):
        """Test that -o writes the body to a file."""
        mock_client.request.return_value = ok_result(b"\x00binary\xff")
        target = tmp_path / "out.bin"

        assert main(["GET", "https://example.com/f", "-o", str(target), "-q"]) == EXIT_OK
        assert target.read_bytes() == b"\x00binary\xff"

    def test_output_file_failure(self, mock_client, tmp_path):
        """Test that an unwritable output path is reported."""
        mock_client.request.return_value = ok_result()
        target = tmp_path / "missing-dir" / "out.bin"

        assert main(["GET", "https://example.com/f", "-o", str(target)]) == EXIT_REQUEST_FAILED

    def test_image_flag(self, mock_client, capsys):
        """Test that --image prints format and dimensions."""
        mock_client.request.return_value = ok_result(make_png(7, 3))

        assert main(["GET", "https://example.com/i.png", "--image"]) == EXIT_OK
        assert "PNG 7x3" in capsys.readouterr().err

    def test_image_flag_with_garbage(self, mock_client):
        """Test that --image fails for non-image bodies."""
        mock_client.request.return_value = ok_result(b"<html></html>")
        assert main(["GET", "https://example.com/page", "--image"]) == EXIT_REQUEST_FAILED

    def test_bad_certificate(self, mock_client, capsys):
        """Test that a certificate error is a usage error."""
        mock_client.cls.side_effect = NetworkError(0, "Unable to load root certificate ca.pem")

        assert main(["GET", "https://example.com", "--cacert", "ca.pem"]) == EXIT_USAGE
        assert "Unable to load root certificate" in capsys.readouterr().err

    def test_bad_header(self, mock_client):
        """Test that malformed headers are a usage error."""
        assert main(["GET", "https://example.com", "-H", "broken"]) == EXIT_USAGE
        mock_client.cls.assert_not_called()

    def test_data_file(self, mock_client, tmp_path):
        """Test that --data-file sends the file contents."""
        body = tmp_path / "body.json"
        body.write_bytes(b'{"k": "v"}')
        mock_client.request.return_value = ok_result()

        assert main(["PUT", "https://example.com/k", "--data-file", str(body), "-q"]) == EXIT_OK
        mock_client.request.assert_called_once_with("PUT", "https://example.com/k", b'{"k": "v"}')

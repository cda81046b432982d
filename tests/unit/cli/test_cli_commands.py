"""Tests for the neocities command line interface."""

import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from neocities_client import __version__
from neocities_client.cli import cli, format_file_size

API_URL = "https://neocities.org/api"


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing."""
    return CliRunner()


class TestUploadCommand:
    """Test the upload command."""

    def test_upload_with_key(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/upload", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("index.html").write_text("<h1>hi</h1>")
            result = cli_runner.invoke(cli, ["upload", "index.html", "--key", "abc"])

        assert result.exit_code == 0, result.output
        assert "Uploaded index.html" in result.output
        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "Bearer abc"
        assert b'name="index.html"; filename="index.html"' in request.read()

    def test_upload_with_name(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/upload", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("local.html").write_text("x")
            result = cli_runner.invoke(
                cli, ["upload", "local.html", "--name", "blog/post.html", "--key", "abc"]
            )

        assert result.exit_code == 0, result.output
        assert b'filename="blog/post.html"' in httpx_mock.get_request().read()

    def test_upload_with_keyfile(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/upload", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("key.txt").write_text("file-key\n")
            Path("a.txt").write_text("a")
            result = cli_runner.invoke(cli, ["upload", "a.txt", "--keyfile", "key.txt"])

        assert result.exit_code == 0, result.output
        assert httpx_mock.get_request().headers["Authorization"] == "Bearer file-key"

    def test_upload_with_environment_key(self, cli_runner, httpx_mock, monkeypatch):
        monkeypatch.setenv("NEOCITIES_API_KEY", "env-key")
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/upload", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("a.txt").write_text("a")
            result = cli_runner.invoke(cli, ["upload", "a.txt"])

        assert result.exit_code == 0, result.output
        assert httpx_mock.get_request().headers["Authorization"] == "Bearer env-key"

    def test_missing_keyfile_fails(self, cli_runner, httpx_mock):
        with cli_runner.isolated_filesystem():
            Path("a.txt").write_text("a")
            result = cli_runner.invoke(cli, ["upload", "a.txt", "--keyfile", "nope"])

        assert result.exit_code == 1
        assert "Failed to read keyfile" in result.output

    def test_missing_key_fails(self, cli_runner, httpx_mock):
        with cli_runner.isolated_filesystem():
            Path("a.txt").write_text("a")
            result = cli_runner.invoke(cli, ["upload", "a.txt"])

        assert result.exit_code == 1
        assert "no key supplied" in result.output

    def test_api_error_fails(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{API_URL}/upload",
            status_code=400,
            json={"result": "error", "message": "a.exe is not a valid file type"},
        )

        with cli_runner.isolated_filesystem():
            Path("a.exe").write_text("x")
            result = cli_runner.invoke(cli, ["upload", "a.exe", "--key", "abc"])

        assert result.exit_code == 1
        assert "not a valid file type" in result.output

    def test_network_error_fails(self, cli_runner, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("[Errno 111] Connection refused"))

        with cli_runner.isolated_filesystem():
            Path("a.txt").write_text("a")
            result = cli_runner.invoke(cli, ["upload", "a.txt", "--key", "abc"])

        assert result.exit_code == 1
        assert "Connection refused" in result.output


class TestPushCommand:
    """Test the push command."""

    def test_push_directory(self, cli_runner, httpx_mock):
        for _ in range(2):
            httpx_mock.add_response(
                method="POST", url=f"{API_URL}/upload", json={"result": "success"}
            )

        with cli_runner.isolated_filesystem():
            Path("site/css").mkdir(parents=True)
            Path("site/index.html").write_text("home")
            Path("site/css/style.css").write_text("body {}")
            result = cli_runner.invoke(cli, ["push", "site", "--key", "abc"])

        assert result.exit_code == 0, result.output
        assert "Pushed 2 files (0 failed)" in result.output
        bodies = [r.read() for r in httpx_mock.get_requests()]
        assert b'filename="site/css/style.css"' in bodies[0]
        assert b'filename="site/index.html"' in bodies[1]

    def test_push_reports_failed_files_and_continues(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{API_URL}/upload",
            status_code=400,
            json={"result": "error", "message": "too large"},
        )
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/upload", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("site").mkdir()
            Path("site/a.html").write_text("a")
            Path("site/b.html").write_text("b")
            result = cli_runner.invoke(cli, ["push", "site", "--key", "abc"])

        assert result.exit_code == 0, result.output
        assert "site/a.html" in result.output
        assert "Pushed 1 files (1 failed)" in result.output

    def test_push_missing_directory_fails(self, cli_runner, httpx_mock):
        with cli_runner.isolated_filesystem():
            result = cli_runner.invoke(cli, ["push", "nowhere", "--key", "abc"])

        assert result.exit_code == 1
        assert "nowhere" in result.output


class TestDeleteCommand:
    """Test the delete command."""

    def test_delete_files(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST", url=f"{API_URL}/delete", json={"result": "success"}
        )

        result = cli_runner.invoke(cli, ["delete", "a.html", "b.html", "--key", "abc"])

        assert result.exit_code == 0, result.output
        assert "Deleted 2 files" in result.output
        assert httpx_mock.get_request().read() == (
            b"filenames%5B%5D=a.html&filenames%5B%5D=b.html"
        )

    def test_failed_delete_exits_non_zero(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{API_URL}/delete",
            status_code=400,
            json={"result": "error", "message": "a.html was not found"},
        )

        result = cli_runner.invoke(cli, ["delete", "a.html", "--key", "abc"])

        assert result.exit_code == 1
        assert "a.html was not found" in result.output

    def test_delete_requires_files(self, cli_runner):
        result = cli_runner.invoke(cli, ["delete", "--key", "abc"])
        assert result.exit_code == 2


class TestListCommand:
    """Test the list command."""

    def test_list_files(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            json={
                "files": [
                    {"path": "img", "is_directory": True},
                    {"path": "index.html", "is_directory": False, "size": 2048},
                ]
            },
        )

        result = cli_runner.invoke(cli, ["list", "--key", "abc"])

        assert result.exit_code == 0, result.output
        assert "img/" in result.output
        assert "index.html" in result.output
        assert "2.0 KB" in result.output

    def test_list_empty(self, cli_runner, httpx_mock):
        httpx_mock.add_response(method="GET", json={"files": []})

        result = cli_runner.invoke(cli, ["list", "--key", "abc"])

        assert result.exit_code == 0
        assert "(empty directory)" in result.output


class TestInfoCommand:
    """Test the info command."""

    def test_info_without_key(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="GET",
            url=f"{API_URL}/info?sitename=mysite",
            json={
                "result": "success",
                "info": {"sitename": "mysite", "hits": 42, "tags": ["art"]},
            },
        )

        result = cli_runner.invoke(cli, ["info", "mysite"])

        assert result.exit_code == 0, result.output
        assert "mysite" in result.output
        assert "42" in result.output
        assert "art" in result.output


class TestGlobalOptions:
    """Test options on the command group."""

    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_file_base_url(self, cli_runner, httpx_mock):
        httpx_mock.add_response(
            method="POST", url="http://localhost:9292/api/delete", json={"result": "success"}
        )

        with cli_runner.isolated_filesystem():
            Path("config.json").write_text(json.dumps({"base_url": "http://localhost:9292"}))
            result = cli_runner.invoke(
                cli, ["--config", "config.json", "delete", "a.html", "--key", "abc"]
            )

        assert result.exit_code == 0, result.output

    def test_missing_config_file_fails(self, cli_runner):
        result = cli_runner.invoke(cli, ["--config", "absent.json", "delete", "a.html"])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestFormatFileSize:
    """Test human-readable sizes."""

    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 B"), (1023, "1023 B"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5.0 MB")],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected

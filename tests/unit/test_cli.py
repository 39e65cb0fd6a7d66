"""Tests for the sparkcli command line."""

import json
import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sparkcli import VERSION
from sparkcli.cli.app import app

BASE_URL = "https://api.example.test/v1"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def invoke(runner: CliRunner, config_path: Path, *args: str):
    return runner.invoke(app, ["--config", str(config_path), *args])


class TestGlobalOptions:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert VERSION in result.output

    def test_help_without_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """Help never needs a config file."""
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "rooms", "--help"])

        assert result.exit_code == 0
        assert "list" in result.output

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "rooms", "list"])

        assert result.exit_code == 1
        assert "Error:" in result.output


    def test_invalid_environment_setting(
        self, runner: CliRunner, config_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPARKCLI_TIMEOUT", "0")

        result = invoke(runner, config_path, "rooms", "list")

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid settings" in result.output
        assert "timeout" in result.output


class TestRoomsCommands:
    def test_list(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(url=f"{BASE_URL}/rooms", json={"items": [{"id": "R1", "title": "Team"}]})

        result = invoke(runner, config_path, "rooms", "list")

        assert result.exit_code == 0
        assert "R1: Team" in result.output

    def test_list_json(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(url=f"{BASE_URL}/rooms", json={"items": [{"id": "R1", "title": "Team"}]})

        result = invoke(runner, config_path, "--json", "rooms", "list")

        assert result.exit_code == 0
        assert json.loads(result.output) == [{"id": "R1", "title": "Team"}]

    def test_short_aliases(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(url=f"{BASE_URL}/rooms", json={"items": []})

        result = invoke(runner, config_path, "r", "l")
        assert result.exit_code == 0

    def test_create_prints_id(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(method="POST", url=f"{BASE_URL}/rooms", json={"id": "R1", "title": "New"})

        result = invoke(runner, config_path, "rooms", "create", "New")

        assert result.exit_code == 0
        assert result.output.strip() == "R1"

    def test_delete_http_error(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(method="DELETE", url=f"{BASE_URL}/rooms/BAD", status_code=400, text="bad id")

        result = invoke(runner, config_path, "rooms", "delete", "BAD")

        assert result.exit_code != 0
        assert "bad id" in result.output

    def test_delete(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(method="DELETE", url=f"{BASE_URL}/rooms/R1", status_code=204)

        result = invoke(runner, config_path, "rooms", "delete", "R1")

        assert result.exit_code == 0
        assert "Room deleted." in result.output

    def test_set_default_room(self, runner: CliRunner, config_path: Path) -> None:
        result = invoke(runner, config_path, "rooms", "default", "RID")

        assert result.exit_code == 0
        with open(config_path, "rb") as f:
            assert tomllib.load(f)["DefaultRoomId"] == "RID"

        result = invoke(runner, config_path, "rooms", "default")
        assert result.output.strip() == "RID"

    def test_get_default_room(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        invoke(runner, config_path, "rooms", "default", "RID")
        httpx_mock.add_response(url=f"{BASE_URL}/rooms/RID", json={"id": "RID", "title": "Team"})

        result = invoke(runner, config_path, "rooms", "get")

        assert result.exit_code == 0
        assert "Team" in result.output
        assert httpx_mock.get_request().url.path == "/v1/rooms/RID"

    def test_get_without_default_room(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        result = invoke(runner, config_path, "rooms", "get")

        assert result.exit_code == 1
        assert "No default room configured" in result.output
        assert httpx_mock.get_requests() == []


class TestMessagesCommands:
    def test_list_default_room(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        invoke(runner, config_path, "rooms", "default", "RID")
        httpx_mock.add_response(
            url=f"{BASE_URL}/messages?roomId=RID",
            json={"items": [{"id": "M1", "text": "hi", "personEmail": "a@example.test", "created": "2016-01-01"}]},
        )

        result = invoke(runner, config_path, "messages", "list", "-")

        assert result.exit_code == 0
        assert "[2016-01-01] a@example.test: hi" in result.output
        assert httpx_mock.get_request().headers["Authorization"] == "Bearer A"

    def test_list_without_room_uses_default(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        invoke(runner, config_path, "rooms", "default", "RID")
        httpx_mock.add_response(method="GET", url=f"{BASE_URL}/messages?roomId=RID", json={"items": []})

        result = invoke(runner, config_path, "messages", "list")

        assert result.exit_code == 0
        request = httpx_mock.get_request()
        assert request.url.params["roomId"] == "RID"
        assert request.headers["Authorization"] == "Bearer A"

    def test_create_file(self, httpx_mock, runner: CliRunner, config_path: Path, tmp_path: Path) -> None:
        upload = tmp_path / "a.png"
        upload.write_bytes(b"\x89PNG data")
        httpx_mock.add_response(method="POST", url=f"{BASE_URL}/messages", json={"id": "M2"})

        result = invoke(runner, config_path, "messages", "create", "file", "RID", str(upload))

        assert result.exit_code == 0
        assert result.output.strip() == "M2"
        request = httpx_mock.get_request()
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        body = request.read()
        assert b'name="roomId"\r\n\r\nRID' in body
        assert b'name="files"; filename="a.png"' in body

    def test_create_text_to_email(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(method="POST", url=f"{BASE_URL}/messages", json={"id": "M1"})

        result = invoke(runner, config_path, "messages", "create", "text", "email:bob@example.com", "hello", "world")

        assert result.exit_code == 0
        assert json.loads(httpx_mock.get_request().content) == {
            "text": "hello world",
            "toPersonEmail": "bob@example.com",
        }

    def test_delete(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(method="DELETE", url=f"{BASE_URL}/messages/M1", status_code=204)

        result = invoke(runner, config_path, "m", "d", "M1")

        assert result.exit_code == 0
        assert "Message deleted." in result.output


class TestPeopleAndMemberships:
    def test_people_get_me(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(
            url=f"{BASE_URL}/people/me",
            json={"id": "P1", "displayName": "Alice", "emails": ["alice@example.com"]},
        )

        result = invoke(runner, config_path, "people", "get")

        assert result.exit_code == 0
        assert "Alice" in result.output
        assert "alice@example.com" in result.output

    def test_membership_update(self, httpx_mock, runner: CliRunner, config_path: Path) -> None:
        httpx_mock.add_response(
            method="PUT",
            url=f"{BASE_URL}/memberships/MS1",
            json={"id": "MS1", "isModerator": True},
        )

        result = invoke(runner, config_path, "memberships", "update", "MS1", "--moderator")

        assert result.exit_code == 0
        assert json.loads(httpx_mock.get_request().content) == {"isModerator": True}


class TestLoginCommand:
    def test_missing_auth_code(self, httpx_mock, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "sparkcli.toml"
        path.write_text(f'BaseUrl = "{BASE_URL}"\nClientId = "c"\nClientSecret = "s"\n')

        result = runner.invoke(app, ["--config", str(path), "login"])

        assert result.exit_code == 1
        assert f"{BASE_URL}/authorize?" in result.output
        assert httpx_mock.get_requests() == []

    def test_login_saves_tokens(self, httpx_mock, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "sparkcli.toml"
        path.write_text(f'BaseUrl = "{BASE_URL}"\nClientId = "c"\nClientSecret = "s"\nAuthCode = "xyz"\n')
        httpx_mock.add_response(
            method="POST",
            url=f"{BASE_URL}/access_token",
            json={"access_token": "A", "refresh_token": "R", "expires_in": 3600, "refresh_token_expires_in": 86400},
        )

        result = runner.invoke(app, ["--config", str(path), "login"])

        assert result.exit_code == 0
        assert "Logged in" in result.output
        with open(path, "rb") as f:
            saved = tomllib.load(f)
        assert saved["AccessToken"] == "A"
        assert saved["RefreshToken"] == "R"
        assert saved["AccessExpires"] > 3600

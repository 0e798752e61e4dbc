import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from fluentbridge import cli
from fluentbridge.errors import ConfigError, StorageError


@pytest.fixture
def logs_file(tmp_path):
    path = tmp_path / "logs.json"
    path.write_text(json.dumps([{"log": "one"}, {"log": "two"}]))
    return path


class TestPush:
    def test_posts_file_to_ingest(self, logs_file, capsys):
        response = MagicMock(status_code=200, ok=True, text='{"inserted":2,"status":"ok"}\n')
        with patch("fluentbridge.cli.requests.post", return_value=response) as post:
            code = cli.main(["push", str(logs_file), "--url", "http://bridge:8080/",
                             "--api-key", "secret", "--db", "apps"])

        assert code == 0
        args, kwargs = post.call_args
        assert args == ("http://bridge:8080/ingest",)
        assert kwargs["data"] == logs_file.read_bytes()
        assert kwargs["params"] == {"db": "apps"}
        assert kwargs["headers"]["X-API-Key"] == "secret"
        assert "200" in capsys.readouterr().out

    def test_api_key_from_environment(self, logs_file, monkeypatch):
        monkeypatch.setenv("API_KEY", "env-secret")
        response = MagicMock(status_code=200, ok=True, text="")
        with patch("fluentbridge.cli.requests.post", return_value=response) as post:
            cli.main(["push", str(logs_file)])
        assert post.call_args.kwargs["headers"]["X-API-Key"] == "env-secret"

    def test_error_status_exit_code(self, logs_file):
        response = MagicMock(status_code=401, ok=False, text="unauthorized")
        with patch("fluentbridge.cli.requests.post", return_value=response):
            assert cli.main(["push", str(logs_file), "--api-key", "bad"]) == 1

    def test_connection_error(self, logs_file):
        with patch("fluentbridge.cli.requests.post", side_effect=requests.ConnectionError("refused")):
            assert cli.main(["push", str(logs_file)]) == 1

    def test_missing_file(self, tmp_path):
        assert cli.main(["push", str(tmp_path / "missing.json")]) == 1


class TestServe:
    def test_config_error_exits(self):
        with patch("fluentbridge.cli.get_config", side_effect=ConfigError("MONGODB_URI environment variable required")):
            assert cli.main(["serve"]) == 1

    def test_connect_failure_exits(self, config):
        storage = MagicMock()
        storage.connect.side_effect = StorageError("failed to ping MongoDB: timeout")
        with patch("fluentbridge.cli.get_config", return_value=config), \
                patch("fluentbridge.cli.MongoClient.from_config", return_value=storage), \
                patch("fluentbridge.cli.create_app") as create_app:
            assert cli.main(["serve"]) == 1
        create_app.assert_not_called()

    def test_runs_app(self, config):
        storage = MagicMock()
        with patch("fluentbridge.cli.get_config", return_value=config), \
                patch("fluentbridge.cli.MongoClient.from_config", return_value=storage), \
                patch("fluentbridge.cli.create_app") as create_app:
            assert cli.main(["serve", "--port", "9999"]) == 0

        create_app.assert_called_once_with(config, storage=storage)
        create_app.return_value.run.assert_called_once_with(host="0.0.0.0", port=9999, threaded=True)
        storage.connect.assert_called_once()
        storage.disconnect.assert_called_once()


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])

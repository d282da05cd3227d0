import json
from unittest.mock import MagicMock

from metar_wallpaper import cli
from metar_wallpaper.errors import FetchError


def test_parse_command(capsys):
    assert cli.main(["parse", "KBFI 261853Z VRB03KT 10SM 22/15 A2992"]) == 0

    body = json.loads(capsys.readouterr().out)
    assert body["station_id"] == "KBFI"
    assert body["wind"] == {"direction": 0, "speed": 3, "gust": 0}


def test_parse_command_malformed():
    assert cli.main(["parse", "KBFI"]) == 1


def test_once_requires_paths():
    assert cli.main(["once"]) == 2


def test_once(monkeypatch, tmp_path):
    run_cycle = MagicMock()
    monkeypatch.setattr("metar_wallpaper.cli.run_cycle", run_cycle)

    code = cli.main([
        "--airport", "ksea",
        "--background", str(tmp_path / "bg.png"),
        "--output", str(tmp_path / "out.png"),
        "--name", "Sam",
        "--no-apply",
        "once",
    ])

    assert code == 0
    settings = run_cycle.call_args.args[0]
    assert settings.airport == "KSEA"
    assert settings.user_name == "Sam"
    assert settings.apply_wallpaper is False


def test_once_failure(monkeypatch, tmp_path):
    monkeypatch.setattr(
        "metar_wallpaper.cli.run_cycle", MagicMock(side_effect=FetchError("offline"))
    )

    code = cli.main(["--background", "bg.png", "--output", "out.png", "once"])

    assert code == 1


def test_run_keeps_going_after_initial_failure(monkeypatch):
    monkeypatch.setattr(
        "metar_wallpaper.cli.run_cycle", MagicMock(side_effect=FetchError("offline"))
    )
    scheduled = MagicMock()
    monkeypatch.setattr("metar_wallpaper.cli.run_forever", scheduled)

    code = cli.main(["--background", "bg.png", "--output", "out.png", "--interval", "5"])

    assert code == 0
    assert scheduled.call_args.args[1] == 5


def test_invalid_interval():
    assert cli.main(["--background", "bg.png", "--output", "out.png", "--interval", "0", "once"]) == 2


class TestServe:

    def setup_method(self):
        self.served = []

    def fake_uvicorn_run(self, app, host, port):
        self.served.append((app, host, port))

    def test_updates_before_serving(self, monkeypatch):
        result = MagicMock()
        run_cycle = MagicMock(return_value=result)
        scheduled = MagicMock()
        monkeypatch.setattr("metar_wallpaper.cli.run_cycle", run_cycle)
        monkeypatch.setattr("metar_wallpaper.cli.run_forever", scheduled)
        monkeypatch.setattr("uvicorn.run", self.fake_uvicorn_run)

        code = cli.main(["--background", "bg.png", "--output", "out.png", "serve", "--port", "8123"])

        assert code == 0
        run_cycle.assert_called_once()
        app, host, port = self.served[0]
        assert (host, port) == ("127.0.0.1", 8123)
        assert app.state.latest.get() is result

    def test_initial_failure_still_serves(self, monkeypatch):
        monkeypatch.setattr(
            "metar_wallpaper.cli.run_cycle", MagicMock(side_effect=FetchError("offline"))
        )
        monkeypatch.setattr("metar_wallpaper.cli.run_forever", MagicMock())
        monkeypatch.setattr("uvicorn.run", self.fake_uvicorn_run)

        code = cli.main(["--background", "bg.png", "--output", "out.png", "serve"])

        assert code == 0
        app, _, _ = self.served[0]
        assert app.state.latest.get() is None

    def test_without_paths_only_serves(self, monkeypatch):
        run_cycle = MagicMock()
        monkeypatch.setattr("metar_wallpaper.cli.run_cycle", run_cycle)
        monkeypatch.setattr("uvicorn.run", self.fake_uvicorn_run)

        assert cli.main(["serve"]) == 0
        run_cycle.assert_not_called()
        assert len(self.served) == 1

"""Tests for cli module."""
from unittest.mock import patch

import pytest

from sleek import __version__
from sleek.cli import build_parser, create_router, main, run
from sleek.config import Exit, KeyPolicy, Settings


class TestBuildParser:
    """Tests for the argument parser."""

    def test_reset_force_default_false(self):
        args = build_parser().parse_args(["reset"])
        assert args.command == "reset"
        assert args.force is False

    def test_reset_force(self):
        assert build_parser().parse_args(["reset", "--force"]).force is True

    def test_check_deps_defaults(self):
        args = build_parser().parse_args(["check-deps"])
        assert args.manifest_path == "Cargo.toml"
        assert args.lock_path is None

    def test_log_limit_default(self):
        assert build_parser().parse_args(["log"]).limit == 5

    def test_log_limit_explicit(self):
        assert build_parser().parse_args(["log", "-n", "2"]).limit == 2

    @pytest.mark.parametrize("value", ["0", "-1", "three"])
    def test_log_limit_must_be_positive(self, value, capsys):
        """A zero, negative or non-numeric -n is a usage error."""
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["log", "-n", value])
        assert exc.value.code == 2
        assert "--limit" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestCreateRouter:
    """Tests for component wiring."""

    def test_settings_applied(self):
        router = create_router(Settings(key_policy=KeyPolicy.FULL, build_tool="/opt/cargo"))
        assert router.store.key_policy == KeyPolicy.FULL
        assert router.executor.process.program == "/opt/cargo"
        assert router.profiler.process is router.executor.process

    def test_store_shared(self):
        router = create_router()
        assert router.executor.store is router.store


class TestMain:
    """Tests for the entry points."""

    @patch("sleek.cli.configure_logging")
    @patch("sleek.cli.load_settings", return_value=Settings())
    @patch("sleek.cli.create_router")
    def test_main_routes_argv(self, mock_create, mock_settings, mock_logging):
        mock_create.return_value.route.return_value = 7
        assert main(["build", "--release"]) == 7
        mock_create.return_value.route.assert_called_once_with(["build", "--release"])
        mock_logging.assert_called_once_with(debug=False)

    @patch("sleek.cli.main", return_value=3)
    def test_run_exits_with_code(self, mock_main):
        with pytest.raises(SystemExit) as exc:
            run()
        assert exc.value.code == 3

    @patch("sleek.cli.main", side_effect=KeyboardInterrupt)
    def test_run_interrupted(self, mock_main):
        with pytest.raises(SystemExit) as exc:
            run()
        assert exc.value.code == Exit.INTERRUPTED

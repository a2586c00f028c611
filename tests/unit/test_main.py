"""
Unit tests for the threadbrotr CLI (``threadbrotr.__main__``).

Tests:
- parse_args argument parsing
- build_config YAML loading and CLI overrides
- run exit codes and output modes
- main KeyboardInterrupt handling
"""

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from threadbrotr.__main__ import (
    DEFAULT_CONFIG,
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_NO_REPLIES,
    EXIT_OK,
    build_config,
    main,
    parse_args,
    run,
    setup_logging,
)
from threadbrotr.core.exceptions import (
    ConfigurationError,
    InvalidReferenceError,
    RelaySetUnreachableError,
)
from threadbrotr.nips.nip19 import decode_reference
from threadbrotr.services.resolver import DEFAULT_RELAYS, ResolvedThread
from tests.conftest import hex_id


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "threadbrotr.yaml"
    path.write_text("relays:\n  - wss://relay.damus.io\nlimits:\n  max_depth: 3\n")
    return path


@pytest.fixture
def make_thread(make_note):
    def _make(*, replies: bool = True) -> ResolvedThread:
        root = make_note(1, content="Hello")
        return ResolvedThread(
            reference=decode_reference(hex_id(1)),
            root_id=hex_id(1),
            root=root,
            replies=(make_note(2, replies_to=1),) if replies else (),
        )

    return _make


@pytest.fixture
def mock_resolver():
    """Patch ThreadResolver in the CLI module; yields (class mock, resolve mock)."""
    with patch("threadbrotr.__main__.ThreadResolver") as resolver_cls:
        resolve = AsyncMock()
        resolver_cls.return_value = MagicMock(resolve=resolve)
        yield resolver_cls, resolve


def _args(config: Path, *extra: str) -> list[str]:
    return [hex_id(1), "--config", str(config), *extra]


# ============================================================================
# parse_args Tests
# ============================================================================


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([hex_id(1)])
        assert args.reference == hex_id(1)
        assert args.config == DEFAULT_CONFIG
        assert args.log_level == "WARNING"
        assert args.json is False
        assert args.max_depth is None
        assert args.relay == []
        assert args.require_replies is False

    def test_all_options(self):
        args = parse_args(
            [
                "note1xyz",
                "--config",
                "custom.yaml",
                "--log-level",
                "DEBUG",
                "--json",
                "--max-depth",
                "4",
                "--relay",
                "wss://a.example.com",
                "--relay",
                "wss://b.example.com",
                "--require-replies",
            ]
        )
        assert args.config == Path("custom.yaml")
        assert args.log_level == "DEBUG"
        assert args.json is True
        assert args.max_depth == 4
        assert args.relay == ["wss://a.example.com", "wss://b.example.com"]
        assert args.require_replies is True

    def test_reference_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            parse_args([hex_id(1), "--log-level", "TRACE"])


# ============================================================================
# setup_logging Tests
# ============================================================================


class TestSetupLogging:
    def test_installs_handler(self):
        before = list(logging.root.handlers)
        level = logging.root.level
        try:
            setup_logging("ERROR")
            assert logging.root.level == logging.ERROR
            assert len(logging.root.handlers) == len(before) + 1
        finally:
            for handler in logging.root.handlers[len(before) :]:
                logging.root.removeHandler(handler)
            logging.root.setLevel(level)


# ============================================================================
# build_config Tests
# ============================================================================


class TestBuildConfig:
    def test_from_file(self, config_file):
        config = build_config(parse_args(_args(config_file)))
        assert config.relays == ["wss://relay.damus.io"]
        assert config.limits.max_depth == 3

    def test_missing_file_uses_defaults(self, tmp_path):
        config = build_config(parse_args(_args(tmp_path / "missing.yaml")))
        assert config.relays == list(DEFAULT_RELAYS)

    def test_relay_appended(self, config_file):
        config = build_config(parse_args(_args(config_file, "--relay", "wss://extra.example.com")))
        assert config.relays == ["wss://relay.damus.io", "wss://extra.example.com"]

    def test_relay_appended_to_defaults(self, tmp_path):
        args = parse_args(_args(tmp_path / "missing.yaml", "--relay", "wss://extra.example.com"))
        assert build_config(args).relays == [*DEFAULT_RELAYS, "wss://extra.example.com"]

    def test_max_depth_override(self, config_file):
        config = build_config(parse_args(_args(config_file, "--max-depth", "5")))
        assert config.limits.max_depth == 5

    def test_invalid_override(self, config_file):
        with pytest.raises(ConfigurationError):
            build_config(parse_args(_args(config_file, "--max-depth", "99")))

    def test_invalid_relay(self, config_file):
        with pytest.raises(ConfigurationError):
            build_config(parse_args(_args(config_file, "--relay", "http://not-a-relay.com")))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("relays: [unclosed\n")
        with pytest.raises(ConfigurationError):
            build_config(parse_args(_args(path)))

    def test_null_sections_with_overrides(self, tmp_path):
        path = tmp_path / "nulls.yaml"
        path.write_text("relays:\nlimits:\n")
        args = parse_args(_args(path, "--relay", "wss://extra.example.com", "--max-depth", "4"))

        config = build_config(args)

        assert config.relays == [*DEFAULT_RELAYS, "wss://extra.example.com"]
        assert config.limits.max_depth == 4

    @pytest.mark.parametrize(
        ("content", "extra"),
        [
            ("relays: wss://relay.damus.io\n", ("--relay", "wss://extra.example.com")),
            ("limits: 3\n", ("--max-depth", "2")),
        ],
    )
    def test_wrong_section_types_with_overrides(self, tmp_path, content, extra):
        path = tmp_path / "wrong.yaml"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            build_config(parse_args(_args(path, *extra)))


# ============================================================================
# run Tests
# ============================================================================


class TestRun:
    async def test_text_output(self, config_file, mock_resolver, make_thread, capsys):
        _, resolve = mock_resolver
        thread = make_thread()
        resolve.return_value = thread

        code = await run(parse_args(_args(config_file)))

        assert code == EXIT_OK
        assert capsys.readouterr().out == thread.render()
        resolve.assert_awaited_once_with(hex_id(1))

    async def test_json_output(self, config_file, mock_resolver, make_thread, capsys):
        _, resolve = mock_resolver
        resolve.return_value = make_thread()

        code = await run(parse_args(_args(config_file, "--json")))

        assert code == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["root_id"] == hex_id(1)
        assert data["reply_count"] == 1

    async def test_config_passed_to_resolver(self, config_file, mock_resolver, make_thread):
        resolver_cls, resolve = mock_resolver
        resolve.return_value = make_thread()

        await run(parse_args(_args(config_file, "--max-depth", "1")))

        config = resolver_cls.call_args.args[0]
        assert config.limits.max_depth == 1

    async def test_empty_thread_ok(self, config_file, mock_resolver, make_thread):
        _, resolve = mock_resolver
        resolve.return_value = make_thread(replies=False)
        assert await run(parse_args(_args(config_file))) == EXIT_OK

    async def test_empty_thread_required(self, config_file, mock_resolver, make_thread, capsys):
        _, resolve = mock_resolver
        resolve.return_value = make_thread(replies=False)

        code = await run(parse_args(_args(config_file, "--require-replies")))

        assert code == EXIT_NO_REPLIES
        assert "REPLIES (0 total)" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "error",
        [
            InvalidReferenceError("npub1xyz", "unsupported prefix"),
            RelaySetUnreachableError(["wss://relay.damus.io"]),
            ConfigurationError("broken"),
        ],
    )
    async def test_handled_errors(self, config_file, mock_resolver, error, capsys):
        _, resolve = mock_resolver
        resolve.side_effect = error

        assert await run(parse_args(_args(config_file))) == EXIT_FAILURE
        assert capsys.readouterr().out == ""

    async def test_invalid_config(self, config_file, mock_resolver):
        resolver_cls, _ = mock_resolver
        assert await run(parse_args(_args(config_file, "--max-depth", "0"))) == EXIT_FAILURE
        resolver_cls.assert_not_called()


# ============================================================================
# main Tests
# ============================================================================


class TestMain:
    async def test_returns_run_code(self, config_file):
        with (
            patch("threadbrotr.__main__.setup_logging") as mock_setup,
            patch("threadbrotr.__main__.run", new=AsyncMock(return_value=EXIT_NO_REPLIES)),
        ):
            code = await main(_args(config_file, "--log-level", "DEBUG"))

        assert code == EXIT_NO_REPLIES
        mock_setup.assert_called_once_with("DEBUG")

    async def test_keyboard_interrupt(self, config_file):
        with (
            patch("threadbrotr.__main__.setup_logging"),
            patch("threadbrotr.__main__.run", new=AsyncMock(side_effect=KeyboardInterrupt)),
        ):
            assert await main(_args(config_file)) == EXIT_INTERRUPTED

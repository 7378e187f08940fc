"""Tests for configuration, default probe wiring and the CLI."""

from __future__ import annotations

import asyncio
import logging
import socket
import threading
import time
from unittest.mock import patch

import httpx
import pytest

from src.config import Settings, settings
from src.health.defaults import build_default_registry
from src.health.probes import ProbeKind
from src.main import build_evaluator, build_servers, main, render_result, run_check, serve_both


# ── Settings ─────────────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self) -> None:
        cfg = Settings(_env_file=None)
        assert cfg.worker_threshold == 100
        assert cfg.dns_hostname == "upstream.example.com"
        assert cfg.dns_timeout_ms == 50
        assert cfg.memory_limit_mib == 200
        assert cfg.health_host == "0.0.0.0"
        assert cfg.health_port == 8085

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORKER_THRESHOLD", "42")
        monkeypatch.setenv("HEALTH_BIND_ADDRESS", "127.0.0.1:9000")
        cfg = Settings(_env_file=None)
        assert cfg.worker_threshold == 42
        assert cfg.health_host == "127.0.0.1"
        assert cfg.health_port == 9000

    def test_empty_host_binds_all(self) -> None:
        assert Settings(_env_file=None, health_bind_address=":8085").health_host == "0.0.0.0"

    def test_ipv6_host(self) -> None:
        cfg = Settings(_env_file=None, health_bind_address="[::1]:8085")
        assert cfg.health_host == "::1"
        assert cfg.health_port == 8085

    @pytest.mark.parametrize("address", ["8085", "localhost:", "localhost:http"])
    def test_malformed_bind_address(self, address: str) -> None:
        cfg = Settings(_env_file=None, health_bind_address=address)
        with pytest.raises(ValueError, match="Invalid bind address"):
            cfg.health_port


# ── Default registry ─────────────────────────────────────────────────────────


class TestDefaultRegistry:
    def test_probe_names(self) -> None:
        registry = build_default_registry(Settings(_env_file=None))
        assert registry.names(ProbeKind.LIVENESS) == ["goroutine-threshold", "memory-allocation"]
        assert registry.names(ProbeKind.READINESS) == ["upstream-dep-dns"]


# ── CLI ──────────────────────────────────────────────────────────────────────


class TestCheckCommand:
    def test_live_healthy(self) -> None:
        cfg = Settings(_env_file=None, worker_threshold=10_000, memory_limit_mib=1_000_000)
        assert run_check("live", cfg) == 0

    def test_live_unhealthy(self) -> None:
        cfg = Settings(_env_file=None, worker_threshold=0)
        assert run_check("live", cfg) == 1

    def test_ready_resolves_localhost(self) -> None:
        cfg = Settings(_env_file=None, dns_hostname="localhost", dns_timeout_ms=5000)
        assert run_check("ready", cfg) == 0

    def test_render_result_rows(self) -> None:
        cfg = Settings(_env_file=None, worker_threshold=0)
        result = build_evaluator(cfg).evaluate(ProbeKind.LIVENESS)
        table = render_result(result)
        assert table.row_count == 2

    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1

    def test_check_exit_code(self) -> None:
        with patch("src.main.run_check", return_value=1) as mock_check:
            with pytest.raises(SystemExit) as exc_info:
                main(["check", "ready"])
        mock_check.assert_called_once_with("ready")
        assert exc_info.value.code == 1

    def test_serve_dispatch(self) -> None:
        with patch("src.main.run_server") as mock_serve:
            main(["serve"])
        mock_serve.assert_called_once_with()

    def test_lowercase_log_level(self) -> None:
        with patch.object(settings, "log_level", "info"):
            with patch("src.main.logging.basicConfig") as mock_basic:
                with pytest.raises(SystemExit):
                    main([])
        assert mock_basic.call_args.kwargs["level"] == logging.INFO


# ── Serve ────────────────────────────────────────────────────────────────────


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServeBoth:
    def test_health_port_survives_api_bind_failure(self) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as occupied:
            occupied.bind(("127.0.0.1", 0))
            occupied.listen(1)
            api_port = occupied.getsockname()[1]
            health_port = _free_port()

            cfg = Settings(
                _env_file=None,
                api_host="127.0.0.1",
                api_port=api_port,
                health_bind_address=f"127.0.0.1:{health_port}",
                worker_threshold=10_000,
                memory_limit_mib=1_000_000,
                log_level="WARNING",
            )
            health_server, api_server = build_servers(cfg)
            thread = threading.Thread(
                target=asyncio.run, args=(serve_both(health_server, api_server),), daemon=True,
            )
            thread.start()
            try:
                status = None
                deadline = time.monotonic() + 10
                while time.monotonic() < deadline:
                    try:
                        status = httpx.get(f"http://127.0.0.1:{health_port}/live", timeout=1).status_code
                        break
                    except httpx.TransportError:
                        time.sleep(0.1)
                assert status == 200
                # The API listener gave up; the health listener is still serving.
                time.sleep(0.3)
                assert thread.is_alive()
                assert httpx.get(f"http://127.0.0.1:{health_port}/live", timeout=1).status_code == 200
            finally:
                health_server.should_exit = True
                thread.join(timeout=10)
            assert not thread.is_alive()

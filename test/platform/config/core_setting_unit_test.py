from pathlib import Path

from pydantic import ValidationError
import pytest

from src.platform.config.core_setting import Settings
from src.service.validation.driving_adapter.connectivity_monitor import ConnectivityMonitor


pytestmark = pytest.mark.unit

ENV_EXAMPLE = Path(__file__).resolve().parents[3] / '.env.example'


@pytest.fixture(autouse=True)
def _no_probe_override(monkeypatch):
    monkeypatch.delenv('CONNECTIVITY_PROBE_URL', raising=False)


class TestConnectivityProbeDefaults:
    @pytest.mark.parametrize('env_file', [None, ENV_EXAMPLE], ids=['defaults', 'env_example'])
    def test_probing_is_disabled_out_of_the_box(self, env_file):
        """The service's own /health always answers, so it can never be the default probe"""
        settings = Settings(_env_file=env_file)  # type: ignore

        assert settings.CONNECTIVITY_PROBE_URL == ''

    @pytest.mark.asyncio
    async def test_default_monitor_follows_pushed_reachability(self):
        settings = Settings(_env_file=None)  # type: ignore
        monitor = ConnectivityMonitor(
            probe_url=settings.CONNECTIVITY_PROBE_URL,
            probe_timeout=settings.CONNECTIVITY_PROBE_TIMEOUT_SECONDS,
            check_interval=settings.CONNECTIVITY_CHECK_INTERVAL_SECONDS,
        )
        reconnects: list[bool] = []

        async def on_reconnect() -> None:
            reconnects.append(True)

        monitor.add_reconnect_listener(on_reconnect)

        await monitor.set_online(False)
        await monitor.check_now()
        assert monitor.is_online is False

        await monitor.set_online(True)
        assert reconnects == [True]


class TestSettingsParsing:
    def test_cors_origins_are_comma_separated(self, monkeypatch):
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', 'http://gate.local, http://localhost:3000')

        settings = Settings(_env_file=None)  # type: ignore

        assert settings.BACKEND_CORS_ORIGINS == ['http://gate.local', 'http://localhost:3000']

    def test_non_positive_sync_interval_is_rejected(self, monkeypatch):
        monkeypatch.setenv('SYNC_INTERVAL_SECONDS', '0')

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore

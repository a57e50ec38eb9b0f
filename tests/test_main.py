"""Tests for the poll loop and CLI entry point."""

import io
import json
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from solr_status.collectors.solr_collector import SolrStatusCollector
from solr_status.main import SolrStatusApp, main
from solr_status.services.retry_policy import CappedBackoffPolicy, FixedIntervalPolicy
from solr_status.config.models import SolrStatusConfig
from solr_status.utils.errors import CoreNotFoundError, UnexpectedStatusError
from solr_status.utils.logger import setup_logger
from solr_status.utils.metrics import MetricsRecord
from solr_status.utils.putval import PutvalEmitter


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def app_factory(solr_config, output):
    """Build an app with a mocked collector and a recording sleep."""
    def build(collect_side_effect, config=solr_config):
        collector = Mock()
        collector.collect = AsyncMock(side_effect=collect_side_effect)
        sleep = AsyncMock()
        app = SolrStatusApp(
            config,
            logger=MagicMock(),
            collector=collector,
            emitter=PutvalEmitter(config.hostname, stream=output),
            sleep=sleep
        )
        return app, sleep
    return build


@pytest.mark.asyncio
async def test_poll_once_success_emits_five_lines(app_factory, output):
    app, _ = app_factory([MetricsRecord(42, 3, 5, 102400, 1)])

    assert await app.poll_once() is True

    lines = output.getvalue().splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("PUTVAL localhost/solr_status/gauge-numdocs ")
    assert lines[0].endswith(":42")
    assert lines[4].endswith(":1")


@pytest.mark.asyncio
async def test_poll_once_failure_logs_and_emits_nothing(app_factory, output):
    app, _ = app_factory(UnexpectedStatusError(503, url="http://localhost:8983/solr"))

    assert await app.poll_once() is False

    assert output.getvalue() == ""
    app.logger.error.assert_called_once()
    message = app.logger.error.call_args[0][0]
    assert "got status code 503" in message
    assert app.logger.error.call_args[1]["extra"]["error_type"] == "UnexpectedStatusError"


@pytest.mark.asyncio
async def test_poll_once_swallows_unexpected_errors(app_factory, output):
    app, _ = app_factory(RuntimeError("bug"))

    assert await app.poll_once() is False

    assert output.getvalue() == ""
    assert app.logger.error.call_args[1]["exc_info"] is True


@pytest.mark.asyncio
async def test_run_keeps_polling_after_failures(app_factory, output):
    """Failures never stop the loop and every wait uses the same interval."""
    app, sleep = app_factory([
        CoreNotFoundError("core1"),
        MetricsRecord(num_docs=1),
        CoreNotFoundError("core1"),
        MetricsRecord(num_docs=2),
    ])

    await app.run(max_polls=4)

    lines = output.getvalue().splitlines()
    assert len(lines) == 10
    assert [call.args[0] for call in sleep.await_args_list] == [20, 20, 20]


@pytest.mark.asyncio
async def test_run_polls_immediately(app_factory):
    app, sleep = app_factory([MetricsRecord()])

    await app.run(max_polls=1)

    app.collector.collect.assert_awaited_once()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_each_poll_gets_a_fresh_record(app_factory, output):
    app, _ = app_factory([MetricsRecord(num_docs=5), MetricsRecord()])

    await app.run(max_polls=2)

    numdocs = [line for line in output.getvalue().splitlines() if "gauge-numdocs" in line]
    assert numdocs[0].endswith(":5")
    assert numdocs[1].endswith(":0")


@pytest.mark.asyncio
async def test_failed_poll_logs_json_to_stderr_only(solr_config, capsys):
    """collectd reads stdout, so diagnostics must never land there."""
    collector = Mock()
    collector.collect = AsyncMock(side_effect=CoreNotFoundError("core1"))
    app = SolrStatusApp(
        solr_config,
        logger=setup_logger("solr_status.poll_failure"),
        collector=collector,
        sleep=AsyncMock()
    )

    assert await app.poll_once() is False

    captured = capsys.readouterr()
    assert captured.out == ""
    lines = captured.err.splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["levelname"] == "ERROR"
    assert "no data could be found for the index 'core1'" in entry["message"]
    assert entry["error_type"] == "CoreNotFoundError"


@pytest.mark.asyncio
async def test_successful_poll_writes_only_putval_to_stdout(solr_config, capsys):
    collector = Mock()
    collector.collect = AsyncMock(return_value=MetricsRecord(num_docs=3))
    app = SolrStatusApp(
        solr_config,
        logger=setup_logger("solr_status.poll_success"),
        collector=collector,
        sleep=AsyncMock()
    )

    await app.run(max_polls=1)

    captured = capsys.readouterr()
    out_lines = captured.out.splitlines()
    assert len(out_lines) == 5
    assert all(line.startswith("PUTVAL ") for line in out_lines)
    assert "PUTVAL" not in captured.err


def test_default_wait_policy_is_fixed(solr_config):
    app = SolrStatusApp(solr_config, logger=MagicMock())
    assert isinstance(app.wait_policy, FixedIntervalPolicy)
    assert app.wait_policy.interval == 20
    assert isinstance(app.collector, SolrStatusCollector)


def test_max_backoff_selects_capped_policy():
    config = SolrStatusConfig(server="localhost", core="core1", interval=10, max_backoff=120)
    app = SolrStatusApp(config, logger=MagicMock())
    assert isinstance(app.wait_policy, CappedBackoffPolicy)
    assert app.wait_policy.max_delay == 120


@pytest.mark.asyncio
async def test_end_to_end_with_stub(solr_config, solr_stub, output):
    """Scenario: sample core status and thread dump produce {42,3,5,102400,1}."""
    collector = SolrStatusCollector(solr_config, MagicMock(), solr_stub.fetcher())
    app = SolrStatusApp(
        solr_config,
        logger=MagicMock(),
        collector=collector,
        emitter=PutvalEmitter("localhost", stream=output)
    )

    assert await app.poll_once() is True

    values = [line.rsplit(":", 1)[1] for line in output.getvalue().splitlines()]
    assert values == ["42", "3", "5", "102400", "1"]


class TestMain:
    """CLI entry point behavior."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for key in ("COLLECTD_HOSTNAME", "COLLECTD_INTERVAL", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

    @patch('solr_status.main.SolrStatusApp')
    def test_missing_server_exits_1(self, mock_app_class, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--core", "core1"])

        assert exc_info.value.code == 1
        assert "no solr server specified" in capsys.readouterr().out
        mock_app_class.assert_not_called()

    @patch('solr_status.main.SolrStatusApp')
    def test_missing_core_exits_1(self, mock_app_class, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--server", "localhost:8983"])

        assert exc_info.value.code == 1
        assert "no core name specified" in capsys.readouterr().out
        mock_app_class.assert_not_called()

    @patch('solr_status.services.http_fetcher.httpx.AsyncClient')
    def test_missing_server_issues_no_requests(self, mock_client_class):
        with pytest.raises(SystemExit):
            main(["--core", "core1"])

        mock_client_class.assert_not_called()

    @patch('solr_status.main.SolrStatusApp')
    def test_run_once_success(self, mock_app_class):
        mock_app_class.return_value.poll_once = AsyncMock(return_value=True)

        with pytest.raises(SystemExit) as exc_info:
            main(["--server", "localhost:8983", "--core", "core1", "--run-once"])

        assert exc_info.value.code == 0
        config = mock_app_class.call_args[0][0]
        assert config.server == "localhost:8983"
        assert config.core == "core1"
        assert config.use_https is False

    @patch('solr_status.main.SolrStatusApp')
    def test_run_once_failure(self, mock_app_class):
        mock_app_class.return_value.poll_once = AsyncMock(return_value=False)

        with pytest.raises(SystemExit) as exc_info:
            main(["--server", "s", "--core", "c", "--https", "--run-once"])

        assert exc_info.value.code == 1
        assert mock_app_class.call_args[0][0].use_https is True

    @patch('solr_status.main.SolrStatusApp')
    def test_runs_loop_by_default(self, mock_app_class):
        mock_app_class.return_value.run = AsyncMock()

        main(["--server", "s", "--core", "c"])

        mock_app_class.return_value.install_signal_handlers.assert_called_once()
        mock_app_class.return_value.run.assert_awaited_once()

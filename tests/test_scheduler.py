"""
Tests for the scheduled sync job, schedule parsing and webhook notifications.

Webhook HTTP calls are patched; nothing leaves the process.

Run with: pytest tests/test_scheduler.py -v
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError

from csintel.config.settings import settings
from csintel.scheduler import jobs, notifications

SLACK_URL = "https://hooks.slack.example/T000/B000"
DISCORD_URL = "https://discord.example/api/webhooks/1"


@pytest.fixture
def report():
    return {
        "results": [
            {"sourceId": "intellizence", "success": True},
            {"sourceId": "crunchbase", "success": False},
        ],
        "summary": {
            "totalSources": 2,
            "successful": 1,
            "failed": 1,
            "newRecords": 57,
            "updatedRecords": 123,
            "errors": 1,
        },
    }


class TestSyncSchedule:

    def test_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "sync_frequency", "disabled")
        assert jobs.get_sync_schedule() is None

    def test_hourly(self, monkeypatch):
        monkeypatch.setattr(settings, "sync_frequency", "Hourly")
        trigger, description = jobs.get_sync_schedule()
        assert description == "hourly"
        assert "minute='0'" in str(trigger)

    @pytest.mark.parametrize("frequency", ["daily", "fortnightly"])
    def test_daily_is_default(self, monkeypatch, frequency):
        monkeypatch.setattr(settings, "sync_frequency", frequency)
        trigger, description = jobs.get_sync_schedule()
        assert description == "daily at 9am EST"
        assert "hour='9'" in str(trigger)


class TestSchedulerLifecycle:

    def test_disabled_does_not_start(self, monkeypatch):
        monkeypatch.setattr(settings, "sync_frequency", "disabled")
        assert jobs.setup_scheduler() is None

    async def test_start_and_shutdown(self, monkeypatch):
        monkeypatch.setattr(settings, "sync_frequency", "hourly")
        scheduler = jobs.setup_scheduler()
        try:
            assert scheduler.running
            assert [job.id for job in scheduler.get_jobs()] == ["scheduled_sync"]
        finally:
            jobs.shutdown_scheduler()
        assert jobs.scheduler is None


class TestScheduledSyncJob:

    async def test_success_records_and_notifies(self, session):
        @asynccontextmanager
        async def test_session():
            yield session

        with patch.object(jobs, "get_session", test_session), \
                patch.object(jobs, "send_sync_summary", AsyncMock(return_value=0)) as send:
            report = await jobs.scheduled_sync_job()

        assert report["summary"]["successful"] == 5
        job_id, sent_report, duration = send.call_args.args
        assert job_id.startswith("sync-")
        assert sent_report is report
        assert duration >= 0

    async def test_database_error_notifies_failure(self, session):
        @asynccontextmanager
        async def test_session():
            yield session

        with patch.object(jobs, "get_session", test_session), \
                patch.object(jobs, "sync_all", AsyncMock(side_effect=SQLAlchemyError("db down"))), \
                patch.object(jobs, "send_sync_summary", AsyncMock(return_value=0)) as send:
            assert await jobs.scheduled_sync_job() is None

        assert send.call_args.args[1] is None
        assert send.call_args.kwargs["error"] == "db down"


class TestMessages:

    def test_success_message(self, report):
        message = notifications.build_success_message("sync-1", report, 12.34)
        assert message["text"].startswith(":warning: *CS Intelligence Sync Complete* [sync-1]")
        assert "Sources synced: 1/2" in message["text"]
        assert "Duration: 12.3s" in message["text"]
        assert "*Failed sources:* crunchbase" in message["text"]
        assert message["blocks"][0]["text"]["text"] == message["text"]

    def test_clean_run_uses_check_mark(self, report):
        report["summary"]["failed"] = 0
        report["results"] = [report["results"][0]]
        message = notifications.build_success_message("sync-1", report, 1.0)
        assert message["text"].startswith(":white_check_mark:")
        assert "*Failed sources:* None" in message["text"]

    def test_error_message(self):
        message = notifications.build_error_message("sync-2", "db down", 0.5)
        assert "Sync FAILED" in message["text"]
        assert "*Error:* db down" in message["text"]


class TestDelivery:

    async def test_no_webhooks_configured(self, report):
        assert await notifications.send_sync_summary("sync-1", report, 1.0) == 0

    async def test_both_channels(self, monkeypatch, report):
        monkeypatch.setattr(settings, "slack_webhook_url", SLACK_URL)
        monkeypatch.setattr(settings, "discord_webhook_url", DISCORD_URL)
        with patch.object(notifications, "_send_slack", AsyncMock(return_value=True)) as slack, \
                patch.object(notifications, "_send_discord", AsyncMock(return_value=True)) as discord:
            delivered = await notifications.send_sync_summary("sync-1", None, 1.0, error="boom")

        assert delivered == 2
        assert "boom" in slack.call_args.args[0]["text"]
        assert "boom" in discord.call_args.args[0]["text"]

    async def test_slack_post(self, monkeypatch):
        monkeypatch.setattr(settings, "slack_webhook_url", SLACK_URL)
        response = httpx.Response(200, request=httpx.Request("POST", SLACK_URL))
        with patch.object(httpx.AsyncClient, "post", AsyncMock(return_value=response)) as post:
            assert await notifications._send_slack({"text": "hi"}) is True

        assert post.call_args.args[0] == SLACK_URL
        assert post.call_args.kwargs["json"] == {"text": "hi"}

    async def test_discord_uses_content_field(self, monkeypatch):
        monkeypatch.setattr(settings, "discord_webhook_url", DISCORD_URL)
        response = httpx.Response(204, request=httpx.Request("POST", DISCORD_URL))
        with patch.object(httpx.AsyncClient, "post", AsyncMock(return_value=response)) as post:
            assert await notifications._send_discord({"text": "hi"}) is True

        assert post.call_args.kwargs["json"] == {"content": "hi"}

    async def test_http_failure_is_not_delivered(self, monkeypatch):
        monkeypatch.setattr(settings, "slack_webhook_url", SLACK_URL)
        error_response = httpx.Response(500, request=httpx.Request("POST", SLACK_URL))
        with patch.object(httpx.AsyncClient, "post", AsyncMock(return_value=error_response)):
            assert await notifications._send_slack({"text": "hi"}) is False

        with patch.object(httpx.AsyncClient, "post", AsyncMock(side_effect=httpx.ConnectError("refused"))):
            assert await notifications._send_slack({"text": "hi"}) is False

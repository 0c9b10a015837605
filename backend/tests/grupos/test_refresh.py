"""
Tests for the deferred group refresh.
"""

from unittest.mock import MagicMock, patch

import pytest

from apps.core.exceptions import PersistenceError
from apps.core.gateway import PersistenceGateway
from apps.grupos.models import Grupo
from apps.grupos.refresh import GroupRefreshScheduler, get_refresh_scheduler, log_pending_groups
from tests.grupos.factories import GrupoFactory, ProvisionedGrupoFactory


class FakeTimer:
    """Captures what threading.Timer would run."""

    def __init__(self, interval, function, args):
        self.interval = interval
        self.function = function
        self.args = args
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function(*self.args)


@pytest.mark.django_db
class TestGroupRefreshScheduler:
    """Tests for GroupRefreshScheduler."""

    def test_schedule_uses_configured_delay(self) -> None:
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)

        timer = scheduler.schedule("org-1", listener=MagicMock())

        assert timer.started is True
        assert timer.interval == 20.0
        assert timer.args[0] == "org-1"
        assert scheduler.pending_count() == 1

    def test_fire_reads_groups_at_fire_time(self) -> None:
        grupo = GrupoFactory.create()
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)
        listener = MagicMock()
        timer = scheduler.schedule(grupo.organization_id, listener)

        # Provisioned out of band before the timer fires
        Grupo.objects.filter(id=grupo.id).update(estado=Grupo.Estado.CREADO, id_grupo="abc123")
        with patch("apps.grupos.refresh.connection"):
            timer.fire()

        groups = listener.call_args.args[0]
        assert [(g.id, g.estado, g.id_grupo) for g in groups] == [(grupo.id, "Creado", "abc123")]
        assert scheduler.pending_count() == 0

    def test_burst_of_creations_shares_one_refresh(self) -> None:
        grupo = GrupoFactory.create()
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)
        first_listener, second_listener = MagicMock(), MagicMock()

        first = scheduler.schedule(grupo.organization_id, first_listener)
        second = scheduler.schedule(grupo.organization_id, second_listener)

        assert first.cancelled is True
        assert scheduler.pending_count() == 1

        with patch("apps.grupos.refresh.connection"), patch.object(
            scheduler, "refresh_now", wraps=scheduler.refresh_now
        ) as mock_refresh:
            second.fire()

        mock_refresh.assert_called_once()
        first_listener.assert_called_once()
        second_listener.assert_called_once()

    def test_superseded_timer_does_nothing(self) -> None:
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)
        listener = MagicMock()
        stale = scheduler.schedule("org-1", listener)
        scheduler.schedule("org-1", listener)

        with patch.object(scheduler, "refresh_now") as mock_refresh:
            stale.fire()

        mock_refresh.assert_not_called()
        assert scheduler.pending_count() == 1

    def test_organizations_refresh_independently(self) -> None:
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)

        first = scheduler.schedule("org-1", MagicMock())
        scheduler.schedule("org-2", MagicMock())

        assert first.cancelled is False
        assert scheduler.pending_count() == 2

    def test_refresh_is_scoped_to_organization(self) -> None:
        grupo = GrupoFactory.create()
        GrupoFactory.create()
        listener = MagicMock()

        GroupRefreshScheduler(timer_factory=FakeTimer).refresh_now(grupo.organization_id, listener)

        assert [g.id for g in listener.call_args.args[0]] == [grupo.id]

    def test_failed_read_skips_listeners(self) -> None:
        gateway = MagicMock(spec=PersistenceGateway)
        gateway.select.side_effect = PersistenceError("down")
        listener = MagicMock()

        result = GroupRefreshScheduler(gateway=gateway, timer_factory=FakeTimer).refresh_now("org-1", listener)

        assert result is False
        listener.assert_not_called()

    def test_timer_callback_closes_connection(self) -> None:
        scheduler = GroupRefreshScheduler(timer_factory=FakeTimer)
        listener = MagicMock()

        with (
            patch.object(scheduler, "refresh_now") as mock_refresh,
            patch("apps.grupos.refresh.connection") as mock_connection,
        ):
            scheduler.schedule("org-1", listener).fire()

        mock_refresh.assert_called_once_with("org-1", listener)
        mock_connection.close.assert_called_once()


def test_shared_scheduler_is_reused() -> None:
    assert get_refresh_scheduler() is get_refresh_scheduler()


@pytest.mark.django_db
class TestLogPendingGroups:
    """Tests for the default refresh listener."""

    def test_counts_pending(self) -> None:
        pending = GrupoFactory.create()
        ProvisionedGrupoFactory.create(organization=pending.organization)
        listener = log_pending_groups(pending.organization_id)

        with patch("apps.grupos.refresh.logger") as mock_logger:
            listener(list(Grupo.objects.filter(organization=pending.organization)))

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["pending"] == 1
        assert mock_logger.info.call_args.kwargs["total"] == 2

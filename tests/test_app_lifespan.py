try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import pytest

from customer_auth import main
from customer_auth.core.config import AppSettings, SessionSettings
from customer_auth.services.session_store import AuthSession, SessionStore

pytestmark = pytest.mark.anyio("asyncio")


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _pending(session_id: str, created_at: float) -> AuthSession:
    return AuthSession(
        session_id=session_id,
        state="state-1",
        redirect_uri="myapp://done",
        store="acme.example",
        created_at=created_at,
    )


@pytest.fixture()
def swept_store(monkeypatch: pytest.MonkeyPatch) -> tuple[SessionStore, FakeClock]:
    clock = FakeClock()
    store = SessionStore(pending_ttl_seconds=60, clock=clock)
    settings = AppSettings(sessions=SessionSettings(SESSION_SWEEP_INTERVAL=0.01))
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(main, "get_session_store", lambda: store)
    return store, clock


async def test_lifespan_sweeps_expired_sessions_until_shutdown(swept_store) -> None:
    store, clock = swept_store
    store.create(_pending("old", created_at=clock()))
    store.create(_pending("fresh", created_at=clock() + 30))
    clock.now += 61

    async with main.lifespan(main.app):
        for _ in range(100):
            if len(store) == 1:
                break
            await asyncio.sleep(0.01)
        assert len(store) == 1
        assert store.get("fresh") is not None

    clock.now += 60
    await asyncio.sleep(0.05)

    # nothing sweeps after shutdown; only access-triggered eviction remains
    assert len(store) == 1


async def test_lifespan_without_interval_starts_no_sweeper(monkeypatch) -> None:
    settings = AppSettings(sessions=SessionSettings(SESSION_SWEEP_INTERVAL=0))
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    before = len(asyncio.all_tasks())

    async with main.lifespan(main.app):
        assert len(asyncio.all_tasks()) == before

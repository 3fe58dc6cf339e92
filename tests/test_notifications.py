from sinks.notifications import (
    EventKind,
    FetchEvent,
    NotificationCenter,
    NotificationRouter,
    Severity,
    ToastSink,
)


def test_router_sends_network_events_to_notification_center():
    router = NotificationRouter()
    event = FetchEvent(kind=EventKind.NETWORK, message="Server connection lost. Retrying...")

    router(event)
    router(event)

    assert router.center.entries == [event, event]
    assert list(router.toasts.shown) == []


def test_router_sends_other_events_to_toasts():
    router = NotificationRouter()
    events = [
        FetchEvent(kind=EventKind.AUTH_EXPIRED, message="Session expired.", key="auth-error"),
        FetchEvent(kind=EventKind.LIVE_FAILED, message="Failed", severity=Severity.WARNING, key="live-data"),
        FetchEvent(kind=EventKind.HISTORY_FAILED, message="Failed", key="history-error"),
    ]

    for event in events:
        router(event)

    assert router.center.entries == []
    assert list(router.toasts.shown) == events


def test_keyed_toast_replaces_instead_of_stacking():
    toasts = ToastSink()
    first = FetchEvent(kind=EventKind.HISTORY_FAILED, message="Failed 1", key="history-error")
    second = FetchEvent(kind=EventKind.HISTORY_FAILED, message="Failed 2", key="history-error")

    toasts.show(first)
    toasts.show(second)

    assert toasts.active == {"history-error": second}


def test_unkeyed_toasts_are_independent():
    toasts = ToastSink()
    event = FetchEvent(kind=EventKind.LIVE_FAILED, message="Failed")

    toasts.show(event)
    toasts.show(event)

    assert len(toasts.active) == 2


def test_dismiss_and_clear():
    toasts = ToastSink()
    toasts.show(FetchEvent(kind=EventKind.AUTH_EXPIRED, message="x", key="auth-error"))
    toasts.dismiss("auth-error")
    toasts.dismiss("unknown")

    center = NotificationCenter()
    center.add(FetchEvent(kind=EventKind.NETWORK, message="y"))
    center.clear()

    assert toasts.active == {}
    assert center.entries == []


def test_toast_history_is_bounded():
    toasts = ToastSink(history_size=5)
    event = FetchEvent(kind=EventKind.HISTORY_FAILED, message="Failed", key="history-error")

    for _ in range(100):
        toasts.show(event)

    assert len(toasts.shown) == 5
    assert toasts.active == {"history-error": event}


def test_unkeyed_toast_keys_stay_unique_past_history_size():
    toasts = ToastSink(history_size=2)
    event = FetchEvent(kind=EventKind.LIVE_FAILED, message="Failed")

    for _ in range(5):
        toasts.show(event)

    assert len(toasts.active) == 5

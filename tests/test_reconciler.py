import threading

from core.applescript import PermissionDeniedError, ScriptExecutionError
from core.models import PlaybackKind, PlaybackState, ScriptCommand
from core.reconciler import Reconciler
from core.store import PlaybackStore


def _reconciler(bridge, artwork, running=True, store=None):
    return Reconciler(
        bridge=bridge,
        store=store or PlaybackStore(),
        running_check=lambda: running,
        artwork=artwork,
    )


def _assert_field_invariant(state):
    if not state.is_active:
        assert state.track_name is None
        assert state.artist_name is None
        assert state.artwork is None
    if state.artist_name is not None:
        assert state.track_name is not None


def test_not_running_short_circuits_before_any_script(make_bridge, fake_artwork):
    bridge = make_bridge({ScriptCommand.GET_PLAYER_STATE: "playing"})
    state = _reconciler(bridge, fake_artwork, running=False).poll()

    assert state == PlaybackState.not_running()
    assert bridge.calls == []


def test_permission_denied_stops_after_one_call(make_bridge, fake_artwork):
    bridge = make_bridge({ScriptCommand.GET_PLAYER_STATE: PermissionDeniedError("-1743")})
    state = _reconciler(bridge, fake_artwork).poll()

    assert state.kind is PlaybackKind.PERMISSION_DENIED
    assert bridge.calls == [ScriptCommand.GET_PLAYER_STATE]
    _assert_field_invariant(state)


def test_player_state_failures_and_unknown_values_read_as_stopped(make_bridge, fake_artwork):
    for value in (ScriptExecutionError("boom"), "kPSS", None, "stopped"):
        bridge = make_bridge({ScriptCommand.GET_PLAYER_STATE: value})
        state = _reconciler(bridge, fake_artwork).poll()
        assert state == PlaybackState.stopped()
        assert bridge.calls == [ScriptCommand.GET_PLAYER_STATE]


def test_playing_without_artwork(make_bridge, fake_artwork):
    bridge = make_bridge({
        ScriptCommand.GET_PLAYER_STATE: "playing",
        ScriptCommand.GET_TRACK_NAME: "Two",
        ScriptCommand.GET_ARTIST_NAME: "Disclosure",
    })
    state = _reconciler(bridge, fake_artwork).poll()

    assert state.kind is PlaybackKind.PLAYING
    assert state.track_name == "Two"
    assert state.artist_name == "Disclosure"
    assert state.artwork is None
    assert fake_artwork.urls == [None]


def test_paused_with_artwork(make_bridge, fake_artwork):
    fake_artwork.data = b"cover"
    bridge = make_bridge({
        ScriptCommand.GET_PLAYER_STATE: "Paused",
        ScriptCommand.GET_TRACK_NAME: "Two",
        ScriptCommand.GET_ARTIST_NAME: "Disclosure",
        ScriptCommand.GET_ARTWORK_URL: "https://i.scdn.co/image/abc",
    })
    state = _reconciler(bridge, fake_artwork).poll()

    assert state == PlaybackState.paused("Two", "Disclosure", b"cover")
    assert fake_artwork.urls == ["https://i.scdn.co/image/abc"]


def test_field_failures_fall_back_without_aborting(make_bridge, fake_artwork):
    bridge = make_bridge({
        ScriptCommand.GET_PLAYER_STATE: "playing",
        ScriptCommand.GET_TRACK_NAME: ScriptExecutionError("no track"),
        ScriptCommand.GET_ARTIST_NAME: "missing value",
        ScriptCommand.GET_ARTWORK_URL: PermissionDeniedError("-1743"),
    })
    state = _reconciler(bridge, fake_artwork).poll()

    assert state == PlaybackState.playing("Unknown Track", "Unknown Artist")
    assert bridge.calls == [
        ScriptCommand.GET_PLAYER_STATE,
        ScriptCommand.GET_TRACK_NAME,
        ScriptCommand.GET_ARTIST_NAME,
        ScriptCommand.GET_ARTWORK_URL,
    ]


def test_stopped_drops_previous_track_details(make_bridge, fake_artwork):
    responses = {
        ScriptCommand.GET_PLAYER_STATE: "playing",
        ScriptCommand.GET_TRACK_NAME: "Two",
        ScriptCommand.GET_ARTIST_NAME: "Disclosure",
    }
    bridge = make_bridge(responses)
    reconciler = _reconciler(bridge, fake_artwork)
    assert reconciler.poll().kind is PlaybackKind.PLAYING

    responses[ScriptCommand.GET_PLAYER_STATE] = "stopped"
    bridge.responses = responses
    state = reconciler.poll()

    assert state.kind is PlaybackKind.STOPPED
    _assert_field_invariant(state)


def test_poll_is_idempotent_and_publishes(make_bridge, fake_artwork):
    store = PlaybackStore()
    bridge = make_bridge({
        ScriptCommand.GET_PLAYER_STATE: "playing",
        ScriptCommand.GET_TRACK_NAME: "Two",
        ScriptCommand.GET_ARTIST_NAME: "Disclosure",
    })
    reconciler = _reconciler(bridge, fake_artwork, store=store)

    first = reconciler.poll()
    second = reconciler.poll()

    assert first == second
    assert store.current == second


def test_overlapping_poll_returns_last_published_state(make_bridge, fake_artwork):
    store = PlaybackStore(PlaybackState.stopped())
    entered = threading.Event()
    release = threading.Event()

    class SlowBridge:
        calls = 0

        def execute(self, command):
            SlowBridge.calls += 1
            entered.set()
            release.wait(5)
            return "stopped"

    reconciler = _reconciler(SlowBridge(), fake_artwork, store=store)
    worker = threading.Thread(target=reconciler.poll)
    worker.start()
    assert entered.wait(5)

    assert reconciler.poll() is store.current
    assert SlowBridge.calls == 1

    release.set()
    worker.join(5)
    assert store.current == PlaybackState.stopped()

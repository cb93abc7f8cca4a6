import logging

from bubblegraph.core.signal import (
    SignalBridge, SignalDebugger, SignalEmitter, SIGNAL_DIRTY, SIGNAL_ZOOM_CHANGED,
)


def test_connect_and_emit():
    bridge = SignalBridge()
    seen = []
    bridge.connect(SIGNAL_DIRTY, seen.append)

    bridge.emit(SIGNAL_DIRTY, 'pan')

    assert seen == ['pan']
    assert bridge.is_connected(SIGNAL_DIRTY)

def test_disconnect():
    bridge = SignalBridge()
    seen = []
    conn = bridge.connect(SIGNAL_DIRTY, seen.append)

    conn.disconnect()
    bridge.emit(SIGNAL_DIRTY, 'pan')

    assert seen == []

def test_disconnect_during_emit_is_deferred():
    bridge = SignalBridge()
    seen = []
    conns = []

    def first(reason):
        seen.append(('first', reason))
        conns[1].disconnect()

    conns.append(bridge.connect(SIGNAL_DIRTY, first))
    conns.append(bridge.connect(SIGNAL_DIRTY, lambda reason: seen.append(('second', reason))))

    bridge.emit(SIGNAL_DIRTY, 'a')
    bridge.emit(SIGNAL_DIRTY, 'b')

    assert seen == [('first', 'a'), ('second', 'a'), ('first', 'b')]

def test_handler_error_is_logged(caplog):
    bridge = SignalBridge()
    seen = []

    def broken(reason):
        raise RuntimeError('boom')

    bridge.connect(SIGNAL_DIRTY, broken)
    bridge.connect(SIGNAL_DIRTY, seen.append)

    with caplog.at_level(logging.ERROR, logger='bubblegraph.core.signal'):
        bridge.emit(SIGNAL_DIRTY, 'zoom')

    assert seen == ['zoom']
    assert 'boom' in caplog.text

def test_unbound_emitter_is_silent():
    emitter = SignalEmitter()
    emitter.emit(SIGNAL_DIRTY, 'x')

def test_debugger_logs_watched_signals_and_still_delivers(caplog):
    bridge = SignalBridge()
    seen = []
    bridge.connect(SIGNAL_DIRTY, seen.append)
    debugger = SignalDebugger(bridge)
    debugger.watch(SIGNAL_DIRTY)

    with caplog.at_level(logging.DEBUG, logger='bubblegraph.core.signal'):
        bridge.emit(SIGNAL_DIRTY, 'pan')
        bridge.emit(SIGNAL_ZOOM_CHANGED, 2.0)

    assert seen == ['pan']
    assert f"SIGNAL: {SIGNAL_DIRTY}('pan')" in caplog.text
    assert SIGNAL_ZOOM_CHANGED not in caplog.text

def test_debugger_watch_all(caplog):
    bridge = SignalBridge()
    SignalDebugger(bridge).watch_all()

    with caplog.at_level(logging.DEBUG, logger='bubblegraph.core.signal'):
        bridge.emit(SIGNAL_ZOOM_CHANGED, 2.0)

    assert f"SIGNAL: {SIGNAL_ZOOM_CHANGED}(2.0)" in caplog.text

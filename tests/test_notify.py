from colorcorner.engine.buffer import PixelBuffer
from colorcorner.engine.notify import ChangeNotifier


def test_unsubscribe_stops_delivery():
    notifier = ChangeNotifier()
    seen = []
    unsubscribe = notifier.on_buffer_changed(seen.append)
    snapshot = PixelBuffer(1, 1).snapshot()

    notifier.buffer_changed(snapshot)
    unsubscribe()
    notifier.buffer_changed(snapshot)
    unsubscribe()

    assert seen == [snapshot]


def test_failing_listener_does_not_block_others():
    notifier = ChangeNotifier()
    seen = []

    def broken(can_undo, can_redo):
        raise RuntimeError("boom")

    notifier.on_history_availability(broken)
    notifier.on_history_availability(lambda can_undo, can_redo: seen.append((can_undo, can_redo)))
    notifier.history_availability(True, False)

    assert seen == [(True, False)]


def test_availability_repeats_only_when_forced():
    notifier = ChangeNotifier()
    seen = []
    notifier.on_history_availability(lambda can_undo, can_redo: seen.append((can_undo, can_redo)))

    notifier.history_availability(False, False)
    notifier.history_availability(False, False)
    notifier.history_availability(False, False, force=True)

    assert seen == [(False, False), (False, False)]

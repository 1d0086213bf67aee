import io

from tabmaster.telemetry.base import NOTIFICATION, FanoutTelemetrySink
from tabmaster.telemetry.console import ConsoleTelemetrySink
from tabmaster.telemetry.recorder import StructuredTelemetrySink


def make_sink(verbose: bool = False):
    sink = ConsoleTelemetrySink()
    sink._stdout = io.StringIO()
    # Stabilize tests by hiding timestamps (they only affect prefixes)
    sink._show_ts = False
    sink._verbose = verbose
    return sink


def test_notification_is_printed():
    sink = make_sink()
    sink.emit("notification", {"message": "Window renamed", "level": "success"})
    assert "Window renamed" in sink._stdout.getvalue()


def test_rename_lists_each_window():
    sink = make_sink()
    sink.emit("names.renamed", {"source": "manual", "names": {"win_1": "Research [draft]"}})
    output = sink._stdout.getvalue()
    assert "renamed" in output
    assert "win_1→Research [draft]" in output


def test_undo_shows_history_position():
    sink = make_sink()
    sink.emit("names.undo", {"cursor": 1, "size": 3})
    assert "undo" in sink._stdout.getvalue()
    assert "step 1 of 3" in sink._stdout.getvalue()


def test_merge_events_are_rendered():
    sink = make_sink()
    sink.emit("merge.planned", {"target_id": "win_2", "source_ids": ["win_3", "win_4"]})
    sink.emit("merge.committed", {"target_id": "win_2", "source_ids": ["win_3"], "tabs_moved": 8})
    output = sink._stdout.getvalue()
    assert "win_3 → win_4" in output
    assert "8 tabs into win_2" in output


def test_load_chatter_is_hidden_unless_verbose():
    quiet = make_sink()
    quiet.emit("windows.loaded", {"window_count": 4, "tab_count": 18})
    assert quiet._stdout.getvalue() == ""

    verbose = make_sink(verbose=True)
    verbose.emit("windows.loaded", {"window_count": 4, "tab_count": 18})
    assert "4 windows, 18 tabs" in verbose._stdout.getvalue()


def test_fanout_forwards_to_added_sinks():
    recorder = StructuredTelemetrySink()
    console = make_sink()
    fanout = FanoutTelemetrySink([recorder])
    fanout.add(console)

    fanout.emit(NOTIFICATION, {"message": "Windows merged", "level": "success"})

    assert recorder.notifications() == [{"message": "Windows merged", "level": "success"}]
    assert "Windows merged" in console._stdout.getvalue()

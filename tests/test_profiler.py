import pytest

from enginekit.profiler import (
    COLORS,
    IMGUI_TEXT,
    DrawList,
    ProfilerGraph,
    ProfilersWindow,
    ProfilerTask,
    rgba_le,
)


def _texts(draw_list):
    return [c.text for c in draw_list.commands if c.kind == "text"]


def _render(graph, offset=0, height=100):
    dl = DrawList()
    graph.render_timings(dl, (0.0, 0.0), 200, 200, height, offset)
    return dl


def test_rgba_le_round_trip_and_palette():
    for color in (0x1ABC9CFF, 0x12345678, 0xFFFFFFFF, 0):
        assert rgba_le(rgba_le(color)) == color
    assert COLORS[0] == rgba_le(0x1ABC9CFF)
    assert len(COLORS) == 16
    assert rgba_le(0x000000FF) == 0xFF000000


def test_task_length():
    assert ProfilerTask(1.0, 3.5, "a", 1).length() == pytest.approx(2.5)


def test_graph_needs_frames():
    with pytest.raises(ValueError):
        ProfilerGraph(0)


def test_pop_empty_clip_raises():
    with pytest.raises(IndexError):
        DrawList().pop_clip_rect()


def test_render_outline_and_balanced_clip():
    graph = ProfilerGraph(10)
    graph.load_frame_data([ProfilerTask(0.0, 0.001, "a", COLORS[0])])
    dl = _render(graph)
    first = dl.commands[0]
    assert first.kind == "rect"
    assert first.points == ((0.0, 0.0), (200.0, 100.0))
    assert first.color == 0xFFFFFFFF
    assert first.filled is False
    assert dl.clip_rects == []


def test_merges_consecutive_same_tasks():
    graph = ProfilerGraph(10)
    graph.load_frame_data(
        [
            ProfilerTask(0.0, 0.001, "a", COLORS[0]),
            ProfilerTask(0.001, 0.002, "a", COLORS[0]),
            ProfilerTask(0.002, 0.003, "b", COLORS[1]),
        ]
    )
    texts = _texts(_render(graph))
    assert texts.count("ms] a") == 1
    assert texts.count("ms] b") == 1
    assert "[2.0000" in texts


def test_legend_limited_to_longest_task():
    graph = ProfilerGraph(10)
    graph.load_frame_data(
        [
            ProfilerTask(0.0, 0.001, "short", COLORS[0]),
            ProfilerTask(0.001, 0.005, "long", COLORS[1]),
        ]
    )
    texts = _texts(_render(graph, height=14))
    assert "ms] long" in texts
    assert "ms] short" not in texts


def test_frame_offset_shows_previous_frame():
    graph = ProfilerGraph(10)
    graph.load_frame_data([ProfilerTask(0.0, 0.001, "first", COLORS[0])])
    graph.load_frame_data([ProfilerTask(0.0, 0.001, "second", COLORS[1])])
    assert "ms] second" in _texts(_render(graph, offset=0))
    assert "ms] first" in _texts(_render(graph, offset=1))
    assert graph.current_frame_index == 2


def test_frame_index_wraps():
    graph = ProfilerGraph(2)
    for _ in range(3):
        graph.load_frame_data([])
    assert graph.current_frame_index == 1


def test_tiny_task_not_drawn_as_bar():
    graph = ProfilerGraph(10)
    graph.load_frame_data(
        [
            ProfilerTask(0.0, 0.000001, "tiny", COLORS[2]),
            ProfilerTask(0.000001, 0.001, "big", COLORS[3]),
        ]
    )
    dl = _render(graph)
    graph_bars = [
        c for c in dl.commands
        if c.kind == "rect" and c.filled and c.clip == ((0.0, 0.0), (200.0, 100.0))
    ]
    assert [c.color for c in graph_bars] == [COLORS[3]]


def test_uncolored_legend_text():
    graph = ProfilerGraph(10)
    graph.use_colored_legend_text = False
    graph.load_frame_data([ProfilerTask(0.0, 0.001, "a", COLORS[0])])
    dl = _render(graph)
    text_colors = {c.color for c in dl.commands if c.kind == "text"}
    assert text_colors == {IMGUI_TEXT}


def test_window_fps_and_settings():
    window = ProfilersWindow(0.0)
    window.frame_offset = 5
    window.frame_width = 2
    window.use_colored_legend_text = False
    window.update(0.3)
    assert window.avg_frame_time == pytest.approx(1.0)
    title = window.update(0.6)
    assert window.avg_frame_time == pytest.approx(0.3)
    assert window.fps_frames_count == 0
    assert title.endswith("ms]###ProfilerWindow")
    assert title.startswith("Legit profiler [")
    assert window.frame_offset == 0
    assert window.cpu_graph.frame_width == 2
    assert window.gpu_graph.use_colored_legend_text is False


def test_window_keeps_offset_when_stopped():
    window = ProfilersWindow(0.0)
    window.stop_profiling = True
    window.frame_offset = 7
    window.update(0.1)
    assert window.frame_offset == 7
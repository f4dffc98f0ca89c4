"""Frame-timing profiler graphs that record their drawing into a command list."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import numpy as np

__all__ = [
    "rgba_le",
    "COLORS",
    "IMGUI_TEXT",
    "ProfilerTask",
    "DrawList",
    "ProfilerGraph",
    "ProfilersWindow",
]

Point = tuple[float, float]

_FLT_MAX = 3.4028234663852886e38
_STATS_HISTORY = 300


def rgba_le(color: int) -> int:
    """Reverse the byte order of a 32-bit ``0xRRGGBBAA`` colour."""
    color &= 0xFFFFFFFF
    return (
        ((color & 0xFF000000) >> 24)
        | ((color & 0x00FF0000) >> 8)
        | ((color & 0x0000FF00) << 8)
        | ((color & 0x000000FF) << 24)
    )


TURQOISE = rgba_le(0x1ABC9CFF)
GREEN_SEA = rgba_le(0x16A085FF)
EMERALD = rgba_le(0x2ECC71FF)
NEPHRITIS = rgba_le(0x27AE60FF)
PETER_RIVER = rgba_le(0x3498DBFF)
BELIZE_HOLE = rgba_le(0x2980B9FF)
AMETHYST = rgba_le(0x9B59B6FF)
WISTERIA = rgba_le(0x8E44ADFF)
SUN_FLOWER = rgba_le(0xF1C40FFF)
ORANGE = rgba_le(0xF39C12FF)
CARROT = rgba_le(0xE67E22FF)
PUMPKIN = rgba_le(0xD35400FF)
ALIZARIN = rgba_le(0xE74C3CFF)
POMEGRANATE = rgba_le(0xC0392BFF)
CLOUDS = rgba_le(0xECF0F1FF)
SILVER = rgba_le(0xBDC3C7FF)
IMGUI_TEXT = rgba_le(0xF2F5FAFF)

COLORS = (
    TURQOISE, GREEN_SEA, EMERALD, NEPHRITIS, PETER_RIVER, BELIZE_HOLE, AMETHYST, WISTERIA,
    SUN_FLOWER, ORANGE, CARROT, PUMPKIN, ALIZARIN, POMEGRANATE, CLOUDS, SILVER,
)


@dataclass
class ProfilerTask:
    """One timed span; times are in seconds."""

    start_time: float = 0.0
    end_time: float = 0.0
    name: str = ""
    color: int = 0

    def length(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class _DrawCommand:
    kind: str
    points: tuple[Point, ...]
    color: int
    filled: bool = True
    text: str = ""
    clip: Optional[tuple[Point, Point]] = None


def _pt(p: Sequence[float]) -> Point:
    return (float(p[0]), float(p[1]))


def _add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


class DrawList:
    """Records rectangles, text and polygons together with the active clip rect."""

    def __init__(self) -> None:
        self._commands: list[_DrawCommand] = []
        self._clip_stack: list[tuple[Point, Point]] = []

    @property
    def commands(self) -> list[_DrawCommand]:
        return list(self._commands)

    @property
    def clip_rects(self) -> list[tuple[Point, Point]]:
        return list(self._clip_stack)

    def _clip(self) -> Optional[tuple[Point, Point]]:
        return self._clip_stack[-1] if self._clip_stack else None

    def rect(self, min_point: Sequence[float], max_point: Sequence[float], color: int,
             filled: bool = True) -> None:
        self._commands.append(
            _DrawCommand("rect", (_pt(min_point), _pt(max_point)), color, filled, clip=self._clip())
        )

    def text(self, point: Sequence[float], color: int, text: str) -> None:
        self._commands.append(_DrawCommand("text", (_pt(point),), color, text=text, clip=self._clip()))

    def convex_poly(self, points: Iterable[Sequence[float]], color: int) -> None:
        self._commands.append(
            _DrawCommand("poly", tuple(_pt(p) for p in points), color, clip=self._clip())
        )

    def push_clip_rect(self, min_point: Sequence[float], max_point: Sequence[float]) -> None:
        self._clip_stack.append((_pt(min_point), _pt(max_point)))

    def pop_clip_rect(self) -> None:
        if not self._clip_stack:
            raise IndexError("pop_clip_rect with no clip rect pushed")
        self._clip_stack.pop()


@dataclass
class _FrameData:
    tasks: list[ProfilerTask] = field(default_factory=list)
    task_stats_index: list[int] = field(default_factory=list)


@dataclass
class _TaskStats:
    max_time: float = -1.0
    priority_order: Optional[int] = None
    on_screen_index: Optional[int] = None


class ProfilerGraph:
    """A ring of per-frame task timings drawn as stacked bars with a legend."""

    def __init__(self, frames_count: int) -> None:
        if frames_count < 1:
            raise ValueError(f"a graph needs at least one frame, got {frames_count}")
        self.frame_width = 3
        self.frame_spacing = 1
        self.use_colored_legend_text = True
        self.max_frame_time = 1000.0
        self._frames = [_FrameData() for _ in range(frames_count)]
        self._task_stats: list[_TaskStats] = []
        self._name_to_stats: dict[str, int] = {}
        self._curr_frame_index = 0

    @property
    def current_frame_index(self) -> int:
        return self._curr_frame_index

    def load_frame_data(self, tasks: Sequence[ProfilerTask]) -> None:
        """Store one frame, merging neighbouring tasks with equal name and colour."""
        frame = self._frames[self._curr_frame_index]
        frame.tasks = []
        previous: Optional[ProfilerTask] = None
        for task in tasks:
            if previous is None or previous.color != task.color or previous.name != task.name:
                frame.tasks.append(dataclasses.replace(task))
            else:
                frame.tasks[-1].end_time = task.end_time
            previous = task

        frame.task_stats_index = []
        for task in frame.tasks:
            if task.name not in self._name_to_stats:
                self._name_to_stats[task.name] = len(self._task_stats)
                self._task_stats.append(_TaskStats())
            frame.task_stats_index.append(self._name_to_stats[task.name])

        self._curr_frame_index = (self._curr_frame_index + 1) % len(self._frames)
        self._rebuild_task_stats(self._curr_frame_index, _STATS_HISTORY)

    def _rebuild_task_stats(self, end_frame: int, frames_count: int) -> None:
        for stat in self._task_stats:
            stat.max_time = -1.0
            stat.priority_order = None
            stat.on_screen_index = None

        size = len(self._frames)
        for frame_number in range(frames_count):
            frame = self._frames[(end_frame - 1 - frame_number) % size]
            for task, stat_index in zip(frame.tasks, frame.task_stats_index):
                stat = self._task_stats[stat_index]
                stat.max_time = max(stat.max_time, task.end_time - task.start_time)

        order = sorted(range(len(self._task_stats)), key=lambda i: -self._task_stats[i].max_time)
        for priority, stat_index in enumerate(order):
            self._task_stats[stat_index].priority_order = priority

    def render_timings(self, draw_list: DrawList, origin: Sequence[float], graph_width: int,
                       legend_width: int, height: int, frame_index_offset: int = 0) -> None:
        """Draw the bar graph at ``origin`` and the legend to its right."""
        pos = _pt(origin)
        self._render_graph(draw_list, pos, (float(graph_width), float(height)), frame_index_offset)
        self._render_legend(
            draw_list,
            _add(pos, (float(graph_width), 0.0)),
            (float(legend_width), float(height)),
            frame_index_offset,
        )

    def _bar_height(self, time: float, span: float) -> float:
        return (time / (1.0 / self.max_frame_time)) * span

    def _render_graph(self, draw_list: DrawList, graph_pos: Point, graph_size: Point,
                      frame_index_offset: int) -> None:
        area_max = _add(graph_pos, graph_size)
        draw_list.rect(graph_pos, area_max, 0xFFFFFFFF, False)
        height_threshold = 1.0
        draw_list.push_clip_rect(graph_pos, area_max)

        size = len(self._frames)
        for frame_number, _ in enumerate(self._frames):
            frame_index = (self._curr_frame_index - frame_index_offset - 1 - frame_number) % size
            frame_pos = _add(
                graph_pos,
                (
                    graph_size[0] - 1 - self.frame_width
                    - (self.frame_width + self.frame_spacing) * frame_number,
                    graph_size[1] - 1,
                ),
            )
            if frame_pos[0] < graph_pos[0] + 1:
                break
            for task in self._frames[frame_index].tasks:
                start_h = self._bar_height(task.start_time, graph_size[1])
                end_h = self._bar_height(task.end_time, graph_size[1])
                if abs(end_h - start_h) > height_threshold:
                    draw_list.rect(
                        _add(frame_pos, (0.0, -start_h)),
                        _add(frame_pos, (float(self.frame_width), -end_h)),
                        task.color,
                        True,
                    )

        draw_list.pop_clip_rect()

    def _render_legend(self, draw_list: DrawList, legend_pos: Point, legend_size: Point,
                       frame_index_offset: int) -> None:
        left_margin = 3.0
        left_width = 5.0
        mid_width = 30.0
        right_width = 10.0
        right_margin = 3.0
        right_height = 10.0
        right_spacing = 4.0
        name_offset = 50.0
        text_margin = (5.0, -3.0)

        draw_list.push_clip_rect(legend_pos, (_FLT_MAX, legend_pos[1] + legend_size[1]))

        size = len(self._frames)
        frame = self._frames[(self._curr_frame_index - frame_index_offset - 1) % size]
        max_tasks = int(legend_size[1] / (right_height + right_spacing))

        for stat in self._task_stats:
            stat.on_screen_index = None

        tasks_to_show = min(len(self._task_stats), max_tasks)
        shown = 0
        for task, stat_index in zip(frame.tasks, frame.task_stats_index):
            stat = self._task_stats[stat_index]
            if stat.priority_order is None or stat.priority_order >= tasks_to_show:
                continue
            if stat.on_screen_index is not None:
                continue
            stat.on_screen_index = shown
            shown += 1

            start_h = self._bar_height(task.start_time, legend_size[1])
            end_h = self._bar_height(task.end_time, legend_size[1])

            left_min = _add(legend_pos, (left_margin, legend_size[1]))
            left_max = _add(left_min, (left_width, 0.0))
            left_min = (left_min[0], left_min[1] - start_h)
            left_max = (left_max[0], left_max[1] - end_h)

            right_min = _add(
                legend_pos,
                (
                    left_margin + left_width + mid_width,
                    legend_size[1] - right_margin
                    - (right_height + right_spacing) * stat.on_screen_index,
                ),
            )
            right_max = _add(right_min, (right_width, -right_height))
            self._render_task_marker(draw_list, left_min, left_max, right_min, right_max, task.color)

            text_color = task.color if self.use_colored_legend_text else IMGUI_TEXT
            task_time = np.float32(task.end_time - task.start_time) * np.float32(1000.0)
            text_pos = _add(right_max, text_margin)
            draw_list.text(text_pos, text_color, f"[{float(task_time):.4f}")
            draw_list.text(_add(text_pos, (name_offset, 0.0)), text_color, "ms] " + task.name)

        draw_list.pop_clip_rect()

    @staticmethod
    def _render_task_marker(draw_list: DrawList, left_min: Point, left_max: Point,
                            right_min: Point, right_max: Point, color: int) -> None:
        draw_list.rect(left_min, left_max, color, True)
        draw_list.rect(right_min, right_max, color, True)
        draw_list.convex_poly(
            [
                (left_max[0], left_min[1]),
                (left_max[0], left_max[1]),
                (right_min[0], right_max[1]),
                (right_min[0], right_min[1]),
            ],
            color,
        )


class ProfilersWindow:
    """CPU and GPU graphs with shared display settings and an FPS counter."""

    def __init__(self, now: float) -> None:
        self.stop_profiling = False
        self.frame_offset = 0
        self.cpu_graph = ProfilerGraph(300)
        self.gpu_graph = ProfilerGraph(300)
        self.frame_width = 3
        self.frame_spacing = 1
        self.use_colored_legend_text = True
        self.prev_fps_frame_time = float(now)
        self.fps_frames_count = 0
        self.avg_frame_time = 1.0

    def update(self, now: float) -> str:
        """Advance the FPS counter, push settings to both graphs and return the title."""
        self.fps_frames_count += 1
        delta = float(now) - self.prev_fps_frame_time
        if delta > 0.5:
            self.avg_frame_time = delta / self.fps_frames_count
            self.fps_frames_count = 0
            self.prev_fps_frame_time = float(now)

        title = (
            f"Legit profiler [{1.0 / self.avg_frame_time:.2f}fps\t"
            f"{self.avg_frame_time * 1000.0:.2f}ms]###ProfilerWindow"
        )

        if not self.stop_profiling:
            self.frame_offset = 0
        for graph in (self.gpu_graph, self.cpu_graph):
            graph.frame_width = self.frame_width
            graph.frame_spacing = self.frame_spacing
            graph.use_colored_legend_text = self.use_colored_legend_text
        return title
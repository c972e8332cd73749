"""Waveform display with a click-to-place cursor and cut markers."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import wx

from audiocutter.audio.peaks import compute_peaks
from audiocutter.audio.types import SampleBuffer


_WAVE_COLOUR = wx.Colour(0x4A, 0x90, 0xE2)
_CUT_COLOUR = wx.Colour(0xE0, 0xE0, 0xE0)
_CURSOR_COLOUR = wx.Colour(0x33, 0x33, 0x33)
_MARKER_COLOUR = wx.Colour(0xD0, 0x40, 0x40)


class WaveformPanel(wx.Panel):
    def __init__(self, parent: wx.Window, *, on_seek: Optional[Callable[[float], None]] = None) -> None:
        super().__init__(parent, style=wx.FULL_REPAINT_ON_RESIZE | wx.WANTS_CHARS)
        self.SetMinSize((-1, 200))
        self.SetBackgroundStyle(wx.BG_STYLE_PAINT)
        self._buffer: Optional[SampleBuffer] = None
        self._peaks: Optional[np.ndarray] = None
        self._cursor = 0.0
        self._intro: Optional[float] = None
        self._outro: Optional[float] = None
        self._on_seek = on_seek
        self.Bind(wx.EVT_PAINT, self._on_paint)
        self.Bind(wx.EVT_SIZE, self._on_size)
        self.Bind(wx.EVT_LEFT_DOWN, self._on_click)
        self.Bind(wx.EVT_MOTION, self._on_drag)

    def set_buffer(self, buffer: Optional[SampleBuffer]) -> None:
        self._buffer = buffer
        self._cursor = 0.0
        self._recompute_peaks()
        self.Refresh()

    def set_markers(self, intro: Optional[float], outro: Optional[float]) -> None:
        self._intro = intro
        self._outro = outro
        self.Refresh()

    def get_cursor_seconds(self) -> float:
        return self._cursor

    def _duration(self) -> float:
        return self._buffer.duration if self._buffer is not None else 0.0

    def _recompute_peaks(self) -> None:
        width = self.GetClientSize().width
        if self._buffer is None or width <= 0:
            self._peaks = None
            return
        self._peaks = compute_peaks(self._buffer, width)

    def _x_for(self, seconds: float, width: int) -> int:
        duration = self._duration()
        if duration <= 0:
            return 0
        return int(round(min(max(seconds / duration, 0.0), 1.0) * (width - 1)))

    def _on_size(self, event: wx.SizeEvent) -> None:
        self._recompute_peaks()
        self.Refresh()
        event.Skip()

    def _seek_to_x(self, x: int) -> None:
        width = self.GetClientSize().width
        if self._buffer is None or width <= 1:
            return
        self._cursor = min(max(x / float(width - 1), 0.0), 1.0) * self._duration()
        self.Refresh()
        if self._on_seek:
            self._on_seek(self._cursor)

    def _on_click(self, event: wx.MouseEvent) -> None:
        self.SetFocus()
        self._seek_to_x(event.GetX())

    def _on_drag(self, event: wx.MouseEvent) -> None:
        if event.Dragging() and event.LeftIsDown():
            self._seek_to_x(event.GetX())

    def _on_paint(self, _event: wx.PaintEvent) -> None:
        dc = wx.AutoBufferedPaintDC(self)
        dc.SetBackground(wx.Brush(self.GetBackgroundColour()))
        dc.Clear()
        width, height = self.GetClientSize()
        if self._peaks is None or len(self._peaks) == 0:
            return
        middle = height // 2
        half = max(1, middle - 2)

        intro_x = self._x_for(self._intro, width) if self._intro is not None else None
        outro_x = self._x_for(self._outro, width) if self._outro is not None else None
        dc.SetPen(wx.TRANSPARENT_PEN)
        dc.SetBrush(wx.Brush(_CUT_COLOUR))
        if intro_x:
            dc.DrawRectangle(0, 0, intro_x, height)
        if outro_x is not None and outro_x < width - 1:
            dc.DrawRectangle(outro_x, 0, width - outro_x, height)

        dc.SetPen(wx.Pen(_WAVE_COLOUR))
        for x, (low, high) in enumerate(self._peaks):
            dc.DrawLine(x, middle - int(high * half), x, middle - int(low * half) + 1)

        dc.SetPen(wx.Pen(_MARKER_COLOUR, 2))
        for marker in (intro_x, outro_x):
            if marker is not None:
                dc.DrawLine(marker, 0, marker, height)
        cursor_x = self._x_for(self._cursor, width)
        dc.SetPen(wx.Pen(_CURSOR_COLOUR))
        dc.DrawLine(cursor_x, 0, cursor_x, height)

"""Main editor window."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from functools import partial
from pathlib import Path

import wx

from audiocutter.audio.decode import decode_audio_bytes
from audiocutter.core.config import SettingsManager
from audiocutter.core.errors import AudioCutterError, ExportInProgress
from audiocutter.core.i18n import gettext as _
from audiocutter.core.lookup import LookupResult, search_recording
from audiocutter.core.session import EditSession, load_session
from audiocutter.core.tags import OVERRIDABLE_FIELDS, is_droppable_audio_file
from audiocutter.core.timecode import format_time, parse_time
from audiocutter.export import ExportOutcome, ExportPipeline, ExportState
from audiocutter.ui.waveform_panel import WaveformPanel


logger = logging.getLogger(__name__)

OPEN_WILDCARD = (
    "Audio files (*.mp3;*.m4a)|*.mp3;*.m4a|"
    "Other audio (*.wav;*.flac;*.ogg)|*.wav;*.flac;*.ogg|"
    "All files (*.*)|*.*"
)
SAVE_WILDCARD = "MP3 files (*.mp3)|*.mp3|M4A files (*.m4a)|*.m4a|WAV files (*.wav)|*.wav"

_TAG_LABELS = {
    "title": "Title",
    "artist": "Artist",
    "album": "Album",
    "year": "Year",
}


class _AudioDropTarget(wx.FileDropTarget):
    def __init__(self, frame: "MainFrame") -> None:
        super().__init__()
        self._frame = frame

    def OnDropFiles(self, _x: int, _y: int, filenames) -> bool:  # noqa: N802 - wx API
        if not filenames:
            return False
        path = Path(filenames[0])
        if not is_droppable_audio_file(path):
            self._frame.set_status(_("Please drop an audio file (MP3, M4A, WAV, FLAC or OGG)"))
            return False
        self._frame.load_file(path)
        return True


class MainFrame(wx.Frame):
    def __init__(self, settings: SettingsManager) -> None:
        super().__init__(None, title=_("Audio Cutter"), size=(1200, 800))
        self._settings = settings
        self._session = EditSession()
        self._loading = False
        self._pipeline = ExportPipeline.from_settings(
            settings,
            on_status=lambda message: wx.CallAfter(self.set_status, message),
            on_state_change=lambda state: wx.CallAfter(self._on_export_state, state),
        )
        self._build_menu()
        self._build_ui()
        self.CreateStatusBar()
        self.SetDropTarget(_AudioDropTarget(self))
        self._enable_controls(False)
        self.Bind(wx.EVT_CLOSE, self._on_close)

    def _build_menu(self) -> None:
        file_menu = wx.Menu()
        open_item = file_menu.Append(wx.ID_OPEN, _("&Open audio...\tCtrl+O"))
        self._save_menu_item = file_menu.Append(wx.ID_SAVEAS, _("Save &As...\tCtrl+S"))
        file_menu.AppendSeparator()
        exit_item = file_menu.Append(wx.ID_EXIT, _("E&xit"))
        menu_bar = wx.MenuBar()
        menu_bar.Append(file_menu, _("&File"))
        self.SetMenuBar(menu_bar)
        self.Bind(wx.EVT_MENU, self._on_open, open_item)
        self.Bind(wx.EVT_MENU, self._on_save, self._save_menu_item)
        self.Bind(wx.EVT_MENU, lambda _evt: self.Close(), exit_item)

    def _build_ui(self) -> None:
        panel = wx.Panel(self)
        root = wx.BoxSizer(wx.VERTICAL)

        header = wx.BoxSizer(wx.HORIZONTAL)
        self._open_button = wx.Button(panel, label=_("Open file"))
        self._file_label = wx.StaticText(panel, label=_("No file loaded"))
        header.Add(self._open_button, 0, wx.RIGHT, 8)
        header.Add(self._file_label, 1, wx.ALIGN_CENTER_VERTICAL)
        root.Add(header, 0, wx.EXPAND | wx.ALL, 8)

        self._waveform = WaveformPanel(panel, on_seek=self._on_seek)
        root.Add(self._waveform, 1, wx.EXPAND | wx.LEFT | wx.RIGHT, 8)

        self._time_label = wx.StaticText(panel, label="0:00 / 0:00")
        root.Add(self._time_label, 0, wx.ALL, 8)

        cuts = wx.FlexGridSizer(cols=6, hgap=8, vgap=6)
        self._intro_ctrl = wx.TextCtrl(panel, value="0:00.000")
        self._outro_ctrl = wx.TextCtrl(panel, value="")
        self._set_intro_button = wx.Button(panel, label=_("Set intro"))
        self._set_outro_button = wx.Button(panel, label=_("Set outro"))
        self._fade_in_ctrl = wx.TextCtrl(panel, value=f"{self._settings.get_default_fade_in():g}")
        self._fade_out_ctrl = wx.TextCtrl(panel, value=f"{self._settings.get_default_fade_out():g}")
        cuts.Add(wx.StaticText(panel, label=_("Intro cut")), 0, wx.ALIGN_CENTER_VERTICAL)
        cuts.Add(self._intro_ctrl)
        cuts.Add(self._set_intro_button)
        cuts.Add(wx.StaticText(panel, label=_("Fade in (s)")), 0, wx.ALIGN_CENTER_VERTICAL)
        cuts.Add(self._fade_in_ctrl)
        cuts.AddSpacer(0)
        cuts.Add(wx.StaticText(panel, label=_("Outro cut")), 0, wx.ALIGN_CENTER_VERTICAL)
        cuts.Add(self._outro_ctrl)
        cuts.Add(self._set_outro_button)
        cuts.Add(wx.StaticText(panel, label=_("Fade out (s)")), 0, wx.ALIGN_CENTER_VERTICAL)
        cuts.Add(self._fade_out_ctrl)
        root.Add(cuts, 0, wx.ALL, 8)

        tags_box = wx.StaticBoxSizer(wx.VERTICAL, panel, _("Tags"))
        tag_grid = wx.FlexGridSizer(cols=2, hgap=8, vgap=6)
        tag_grid.AddGrowableCol(1, 1)
        self._tag_ctrls: dict[str, wx.TextCtrl] = {}
        for name in OVERRIDABLE_FIELDS:
            ctrl = wx.TextCtrl(tags_box.GetStaticBox())
            self._tag_ctrls[name] = ctrl
            tag_grid.Add(wx.StaticText(tags_box.GetStaticBox(), label=_(_TAG_LABELS[name])), 0, wx.ALIGN_CENTER_VERTICAL)
            tag_grid.Add(ctrl, 1, wx.EXPAND)
        tags_box.Add(tag_grid, 0, wx.EXPAND | wx.ALL, 4)
        self._lookup_button = wx.Button(tags_box.GetStaticBox(), label=_("Look up album and year"))
        self._lookup_button.Enable(self._settings.get_lookup_enabled())
        tags_box.Add(self._lookup_button, 0, wx.ALL, 4)
        root.Add(tags_box, 0, wx.EXPAND | wx.ALL, 8)

        self._save_button = wx.Button(panel, label=_("Save edited file"))
        root.Add(self._save_button, 0, wx.ALL, 8)
        panel.SetSizer(root)

        self._open_button.Bind(wx.EVT_BUTTON, self._on_open)
        self._save_button.Bind(wx.EVT_BUTTON, self._on_save)
        self._set_intro_button.Bind(wx.EVT_BUTTON, self._on_set_intro)
        self._set_outro_button.Bind(wx.EVT_BUTTON, self._on_set_outro)
        self._lookup_button.Bind(wx.EVT_BUTTON, self._on_lookup)
        self._intro_ctrl.Bind(wx.EVT_TEXT, self._on_cut_text)
        self._outro_ctrl.Bind(wx.EVT_TEXT, self._on_cut_text)

    def set_status(self, message: str) -> None:
        self.SetStatusText(message)

    def _enable_controls(self, enabled: bool) -> None:
        for ctrl in (
            self._save_button,
            self._intro_ctrl,
            self._outro_ctrl,
            self._set_intro_button,
            self._set_outro_button,
            self._fade_in_ctrl,
            self._fade_out_ctrl,
        ):
            ctrl.Enable(enabled)
        self._save_menu_item.Enable(enabled)

    # Loading -----------------------------------------------------------------

    def _on_open(self, _event: wx.CommandEvent) -> None:
        last_dir = self._settings.get_last_directory()
        with wx.FileDialog(
            self,
            _("Open audio file"),
            defaultDir=str(last_dir) if last_dir else "",
            wildcard=OPEN_WILDCARD,
            style=wx.FD_OPEN | wx.FD_FILE_MUST_EXIST,
        ) as dialog:
            if dialog.ShowModal() != wx.ID_OK:
                return
            self.load_file(Path(dialog.GetPath()))

    def load_file(self, path: Path) -> None:
        if self._loading:
            return
        self._loading = True
        self._file_label.SetLabel(path.name)
        self.set_status(_("Loading file..."))
        decoder = partial(decode_audio_bytes, ffmpeg=self._settings.get_ffmpeg_path())
        fade_in = self._settings.get_default_fade_in()
        fade_out = self._settings.get_default_fade_out()

        def worker() -> None:
            try:
                session = load_session(path, decoder=decoder, fade_in=fade_in, fade_out=fade_out)
            except AudioCutterError as exc:
                wx.CallAfter(self._on_load_failed, str(exc))
            except Exception as exc:  # pylint: disable=broad-except
                logger.exception("Failed to load %s", path)
                wx.CallAfter(self._on_load_failed, str(exc))
            else:
                wx.CallAfter(self._on_loaded, session)

        threading.Thread(target=worker, name="audiocutter-load", daemon=True).start()

    def _on_loaded(self, session: EditSession) -> None:
        self._loading = False
        self._session = session
        self._waveform.set_buffer(session.buffer)
        self._intro_ctrl.ChangeValue(session.intro_text)
        self._outro_ctrl.ChangeValue(session.outro_text)
        self._fade_in_ctrl.ChangeValue(session.fade_in_text)
        self._fade_out_ctrl.ChangeValue(session.fade_out_text)
        stored = session.tags.as_dict() if session.tags is not None else {}
        for name, ctrl in self._tag_ctrls.items():
            ctrl.ChangeValue(stored.get(name, ""))
        self._update_markers()
        self._update_time_label()
        self._enable_controls(True)
        if session.path is not None:
            self._settings.set_last_directory(session.path.parent)
        self.set_status(_("File loaded successfully"))

    def _on_load_failed(self, message: str) -> None:
        self._loading = False
        self.set_status(_("Error loading file: {error}").format(error=message))

    # Cut points --------------------------------------------------------------

    def _on_seek(self, _seconds: float) -> None:
        self._update_time_label()

    def _update_time_label(self) -> None:
        self._time_label.SetLabel(
            f"{format_time(self._waveform.get_cursor_seconds())} / {format_time(self._session.duration)}"
        )

    def _on_set_intro(self, _event: wx.CommandEvent) -> None:
        position = self._waveform.get_cursor_seconds()
        self._intro_ctrl.ChangeValue(format_time(position, True))
        self._update_markers()
        self.set_status(_("Intro cut point set at {time}").format(time=format_time(position)))

    def _on_set_outro(self, _event: wx.CommandEvent) -> None:
        position = self._waveform.get_cursor_seconds()
        self._outro_ctrl.ChangeValue(format_time(position, True))
        self._update_markers()
        self.set_status(_("Outro cut point set at {time}").format(time=format_time(position)))

    def _on_cut_text(self, event: wx.CommandEvent) -> None:
        self._update_markers()
        event.Skip()

    def _update_markers(self) -> None:
        intro = parse_time(self._intro_ctrl.GetValue())
        outro = parse_time(self._outro_ctrl.GetValue()) or self._session.duration
        self._waveform.set_markers(intro, outro)

    # Tags lookup -------------------------------------------------------------

    def _on_lookup(self, _event: wx.CommandEvent) -> None:
        artist = self._tag_ctrls["artist"].GetValue()
        title = self._tag_ctrls["title"].GetValue()
        if not artist.strip() or not title.strip():
            self.set_status(_("Enter artist and title first"))
            return
        self._lookup_button.Enable(False)
        self.set_status(_("Searching for track info..."))
        base_url = self._settings.get_lookup_base_url()
        user_agent = self._settings.get_lookup_user_agent()
        timeout = self._settings.get_lookup_timeout()

        def worker() -> None:
            result = search_recording(artist, title, base_url=base_url, user_agent=user_agent, timeout=timeout)
            wx.CallAfter(self._on_lookup_done, result)

        threading.Thread(target=worker, name="audiocutter-lookup", daemon=True).start()

    def _on_lookup_done(self, result: LookupResult) -> None:
        self._lookup_button.Enable(True)
        if not result.success:
            self.set_status(_("Track info not found: {error}").format(error=result.error or ""))
            return
        for name, value in (("album", result.album), ("year", result.year)):
            ctrl = self._tag_ctrls[name]
            if value and not ctrl.GetValue().strip():
                ctrl.ChangeValue(value)
        self.set_status(_("Track info updated"))

    # Export ------------------------------------------------------------------

    def _sync_session(self) -> None:
        self._session.intro_text = self._intro_ctrl.GetValue()
        self._session.outro_text = self._outro_ctrl.GetValue()
        self._session.fade_in_text = self._fade_in_ctrl.GetValue()
        self._session.fade_out_text = self._fade_out_ctrl.GetValue()
        self._session.tag_overrides = {name: ctrl.GetValue() for name, ctrl in self._tag_ctrls.items()}

    def _on_save(self, _event: wx.CommandEvent) -> None:
        if not self._session.is_loaded:
            return
        self.set_status(_("Preparing to save..."))
        default_name = self._session.default_save_name(self._settings.get_filename_suffix())
        default_dir = self._session.path.parent if self._session.path is not None else ""
        with wx.FileDialog(
            self,
            _("Save Edited Audio"),
            defaultDir=str(default_dir),
            defaultFile=default_name,
            wildcard=SAVE_WILDCARD,
            style=wx.FD_SAVE | wx.FD_OVERWRITE_PROMPT,
        ) as dialog:
            if dialog.ShowModal() != wx.ID_OK:
                self.set_status("")
                return
            destination = Path(dialog.GetPath())
        self._sync_session()
        try:
            future = self._pipeline.submit(self._session, destination)
        except ExportInProgress as exc:
            self.set_status(str(exc))
            return
        future.add_done_callback(lambda done: wx.CallAfter(self._on_export_done, done))

    def _on_export_state(self, state: ExportState) -> None:
        busy = state is not ExportState.IDLE and not state.is_terminal
        self._save_button.Enable(not busy and self._session.is_loaded)
        self._save_menu_item.Enable(not busy and self._session.is_loaded)

    def _on_export_done(self, future: "Future[ExportOutcome]") -> None:
        try:
            outcome = future.result()
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Export crashed")
            self.set_status(_("Error processing audio: {error}").format(error=exc))
            return
        self.set_status(outcome.message)

    def _on_close(self, event: wx.CloseEvent) -> None:
        try:
            self._settings.save()
        except OSError as exc:
            logger.warning("Failed to save settings: %s", exc)
        self._pipeline.shutdown(wait=False)
        event.Skip()

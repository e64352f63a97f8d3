"""Unit tests for TableBridge open/save/close orchestration.

A fake converter stands in for LibreOffice: it treats ``.xlsx`` files as CSV
bytes, so every file written by the bridge can be inspected directly.
"""

import codecs
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from utils import snapshot_dir

from tabbridge import open_table
from tabbridge.api import OpenStatus, TableBridge, accept_all
from tabbridge.exceptions import (
    ConversionError,
    ExportWriteError,
    FileNotFoundError,
    SessionClosedError,
    ValidationError,
)
from tabbridge.options import BridgeOptions
from tabbridge.separator import Separator
from tabbridge.session import SessionState
from tabbridge.surface import GridSurface


@pytest.fixture
def bridge(fake_converter):
    return TableBridge(converter=fake_converter, confirm=accept_all)


@pytest.fixture
def report(temp_dir: Path) -> Path:
    path = temp_dir / "report.xlsx"
    path.write_bytes(b"name,total\nwidgets,3\n")
    return path


@pytest.mark.unit
class TestOpenText:
    """Test opening delimited-text files."""

    def test_csv_scenario(self, bridge, sample_csv):
        result = bridge.open(sample_csv)
        assert result.status is OpenStatus.OPENED
        session = result.session
        assert session.separator is Separator.COMMA
        assert not session.is_spreadsheet
        assert session.temp_path is None
        assert session.state is SessionState.LOADED
        assert not session.dirty
        assert session.surface.rows == [["a", "b", "c"], ["1", "2", "3"]]

        session.surface.set_cell(1, 2, "4")
        assert session.dirty

        assert bridge.save(session) is True
        assert sample_csv.read_bytes() == b"a,b,c\n1,2,4\n"
        assert not session.dirty
        assert session.state is SessionState.CLEAN

    def test_tab_file_saved_with_tabs(self, bridge, temp_dir):
        path = temp_dir / "data.tsv"
        path.write_bytes(b"name\tage\r\nAda\t36\r\n")
        session = bridge.open(path).session
        assert session.separator is Separator.TAB
        session.surface.set_cell(1, 1, "37")
        bridge.save(session)
        assert path.read_bytes() == b"name\tage\r\nAda\t37\r\n"

    def test_space_file(self, bridge, temp_dir):
        path = temp_dir / "data.txt"
        path.write_bytes(b"x y z\n1 2 3\n")
        session = bridge.open(path).session
        assert session.separator is Separator.SPACE
        session.surface.append_row(["4", "5", "6"])
        bridge.save(session)
        assert path.read_bytes() == b"x y z\n1 2 3\n4 5 6\n"

    def test_text_files_never_prompt_or_convert(self, fake_converter, sample_csv):
        asked = []
        bridge = TableBridge(converter=fake_converter, confirm=lambda p: asked.append(p) or True)
        bridge.open(sample_csv)
        assert asked == []
        assert fake_converter.calls == []

    def test_header_skip_option(self, fake_converter, temp_dir):
        path = temp_dir / "data.csv"
        path.write_bytes(b"Report\nSubtitle\n1,2\n")
        bridge = TableBridge(BridgeOptions(header_skip_lines=2), converter=fake_converter)
        assert bridge.open(path).session.separator is Separator.COMMA

        other = TableBridge(BridgeOptions(header_skip_lines=0), converter=fake_converter)
        assert other.open(path).session.separator is Separator.SPACE

    def test_encoding_and_bom_preserved(self, bridge, temp_dir):
        path = temp_dir / "data.csv"
        path.write_bytes(codecs.BOM_UTF8 + "city,temp\nZürich,21\n".encode("utf-8"))
        session = bridge.open(path).session
        assert session.encoding == "utf-8-sig"
        session.surface.set_cell(1, 1, "22")
        bridge.save(session)
        assert path.read_bytes() == codecs.BOM_UTF8 + "city,temp\nZürich,22\n".encode("utf-8")

    def test_forced_encoding(self, fake_converter, temp_dir):
        path = temp_dir / "data.csv"
        path.write_bytes("a,b\n\xe9,1\n".encode("cp1252"))
        bridge = TableBridge(BridgeOptions(encoding="cp1252"), converter=fake_converter)
        session = bridge.open(path).session
        assert session.surface.cell(1, 0) == "\xe9"

    def test_missing_file(self, bridge, temp_dir):
        with pytest.raises(FileNotFoundError):
            bridge.open(temp_dir / "missing.csv")
        assert len(bridge.registry) == 0


@pytest.mark.unit
class TestOpenSpreadsheet:
    """Test opening spreadsheets through the confirmation gate."""

    def test_xlsx_scenario(self, bridge, fake_converter, report):
        result = bridge.open(report)
        assert result.status is OpenStatus.OPENED
        session = result.session
        assert session.is_spreadsheet
        assert session.separator is Separator.COMMA
        assert session.spreadsheet_extension == "xlsx"
        assert session.temp_path == report.with_suffix(".csv")
        assert session.temp_path.exists()
        assert session.surface.rows == [["name", "total"], ["widgets", "3"]]

        session.surface.set_cell(1, 1, "4")
        bridge.save(session)

        assert session.temp_path.read_bytes() == b"name,total\nwidgets,4\n"
        assert report.read_bytes() == b"name,total\nwidgets,4\n"
        assert [call[0] for call in fake_converter.calls] == ["to_delimited", "from_delimited"]
        assert fake_converter.calls[-1][3] == "xlsx"
        assert not session.dirty

    def test_detector_not_used_for_spreadsheets(self, bridge, temp_dir):
        path = temp_dir / "tabs.ods"
        path.write_bytes(b"a\tb\n1\t2\n")
        with patch("tabbridge.api.detect_separator") as detect:
            session = bridge.open(path).session
        detect.assert_not_called()
        assert session.separator is Separator.COMMA

    def test_confirmation_receives_path(self, fake_converter, report):
        asked = []
        bridge = TableBridge(converter=fake_converter, confirm=lambda p: asked.append(p) or True)
        bridge.open(report)
        assert asked == [report]

    def test_decline_changes_nothing(self, fake_converter, report, temp_dir):
        bridge = TableBridge(converter=fake_converter, confirm=lambda p: False)
        before = snapshot_dir(temp_dir)

        result = bridge.open(report)

        assert result.status is OpenStatus.DECLINED
        assert result.session is None
        assert not result.opened
        assert snapshot_dir(temp_dir) == before
        assert len(bridge.registry) == 0
        assert fake_converter.calls == []

    def test_default_confirmation_declines(self, fake_converter, report):
        bridge = TableBridge(converter=fake_converter)
        assert bridge.open(report).status is OpenStatus.DECLINED

    def test_forward_failure_creates_no_session(self, bridge, fake_converter, report, temp_dir):
        fake_converter.fail_forward = True
        before = snapshot_dir(temp_dir)
        with pytest.raises(ConversionError) as exc_info:
            bridge.open(report)
        assert exc_info.value.tool == "FakeOffice"
        assert len(bridge.registry) == 0
        assert snapshot_dir(temp_dir) == before

    def test_custom_extensions(self, fake_converter, temp_dir):
        path = temp_dir / "book.xlsm"
        path.write_bytes(b"a,b\n")
        bridge = TableBridge(BridgeOptions(spreadsheet_extensions="xlsm"), converter=fake_converter, confirm=accept_all)
        assert bridge.open(path).session.is_spreadsheet


@pytest.mark.unit
class TestDuplicateOpen:
    """Opening an open file re-surfaces the existing session."""

    def test_same_path_reused(self, bridge, sample_csv):
        first = bridge.open(sample_csv)
        second = bridge.open(sample_csv)
        assert second.status is OpenStatus.REUSED
        assert second.session is first.session
        assert len(bridge.registry) == 1
        assert first.session.surface.focus_count == 2

    def test_equivalent_path_reused(self, bridge, sample_csv):
        first = bridge.open(sample_csv)
        second = bridge.open(sample_csv.parent / "." / sample_csv.name)
        assert second.session is first.session

    def test_relative_path_reused(self, bridge, sample_csv):
        first = bridge.open(sample_csv)
        cwd = os.getcwd()
        os.chdir(sample_csv.parent)
        try:
            second = bridge.open("data.csv")
        finally:
            os.chdir(cwd)
        assert second.session is first.session

    def test_spreadsheet_reopen_does_not_prompt(self, fake_converter, report):
        asked = []
        bridge = TableBridge(converter=fake_converter, confirm=lambda p: asked.append(p) or True)
        bridge.open(report)
        result = bridge.open(report)
        assert result.status is OpenStatus.REUSED
        assert len(asked) == 1
        assert len(fake_converter.calls) == 1

    def test_unsaved_edits_survive_reopen(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        session.surface.set_cell(0, 0, "z")
        again = bridge.open(sample_csv).session
        assert again.dirty
        assert again.surface.cell(0, 0) == "z"


@pytest.mark.unit
class TestSave:
    """Test save semantics and failures."""

    def test_clean_session_not_written(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        mtime = sample_csv.stat().st_mtime_ns
        assert bridge.save(session) is False
        assert sample_csv.stat().st_mtime_ns == mtime

    def test_force_save(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        assert bridge.save(session, force=True) is True
        assert sample_csv.read_bytes() == b"a,b,c\n1,2,3\n"

    def test_reverse_failure_keeps_source_and_dirty(self, bridge, fake_converter, report):
        session = bridge.open(report).session
        original = report.read_bytes()
        session.surface.set_cell(1, 1, "99")

        fake_converter.fail_reverse = True
        with pytest.raises(ConversionError) as exc_info:
            bridge.save(session)

        assert "FakeOffice" in str(exc_info.value)
        assert report.read_bytes() == original
        assert session.dirty
        assert session.state is SessionState.EDITING
        assert session.temp_path.read_bytes() == b"name,total\nwidgets,99\n"

    def test_upper_case_extension_overwrites_source(self, bridge, fake_converter, temp_dir):
        path = temp_dir / "Report.XLSX"
        path.write_bytes(b"name,total\nwidgets,3\n")
        session = bridge.open(path).session
        assert session.spreadsheet_extension == "xlsx"

        session.surface.set_cell(1, 1, "4")
        assert bridge.save(session) is True

        assert sorted(p.name for p in temp_dir.iterdir()) == ["Report.XLSX", "Report.csv"]
        assert path.read_bytes() == b"name,total\nwidgets,4\n"
        assert fake_converter.calls[-1][3] == "xlsx"
        assert not session.dirty

    def test_retry_after_reverse_failure(self, bridge, fake_converter, report):
        session = bridge.open(report).session
        session.surface.set_cell(1, 1, "99")
        fake_converter.fail_reverse = True
        with pytest.raises(ConversionError):
            bridge.save(session)

        fake_converter.fail_reverse = False
        assert bridge.save(session) is True
        assert report.read_bytes() == b"name,total\nwidgets,99\n"
        assert not session.dirty

    def test_export_write_failure(self, bridge, fake_converter, report):
        session = bridge.open(report).session
        session.surface.set_cell(0, 0, "label")
        original = report.read_bytes()

        with patch("tabbridge.export.os.replace", side_effect=PermissionError("read-only")):
            with pytest.raises(ExportWriteError) as exc_info:
                bridge.save(session)

        assert exc_info.value.file_path == str(session.temp_path)
        assert session.dirty
        assert report.read_bytes() == original
        assert [call[0] for call in fake_converter.calls] == ["to_delimited"]
        assert sorted(p.name for p in report.parent.iterdir()) == ["report.csv", "report.xlsx"]

    def test_unencodable_edit(self, fake_converter, temp_dir):
        path = temp_dir / "data.csv"
        path.write_bytes(b"a,b\n1,2\n")
        bridge = TableBridge(BridgeOptions(encoding="ascii"), converter=fake_converter)
        session = bridge.open(path).session
        session.surface.set_cell(1, 0, "€")
        with pytest.raises(ExportWriteError):
            bridge.save(session)
        assert path.read_bytes() == b"a,b\n1,2\n"
        assert session.dirty

    def test_save_after_close(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        bridge.close(session)
        with pytest.raises(SessionClosedError):
            bridge.save(session)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_permissions_preserved(self, bridge, sample_csv):
        sample_csv.chmod(0o640)
        session = bridge.open(sample_csv).session
        session.surface.set_cell(0, 0, "x")
        bridge.save(session)
        assert sample_csv.stat().st_mode & 0o777 == 0o640


@pytest.mark.unit
class TestClose:
    """Test closing sessions."""

    def test_close_unregisters(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        bridge.close(session)
        assert session.is_closed
        assert session.surface.closed
        assert bridge.get(sample_csv) is None
        assert bridge.sessions == []

    def test_reopen_after_close_creates_new_session(self, bridge, sample_csv):
        first = bridge.open(sample_csv).session
        bridge.close(first)
        second = bridge.open(sample_csv)
        assert second.status is OpenStatus.OPENED
        assert second.session is not first

    def test_close_discards_unsaved_edits(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        session.surface.set_cell(0, 0, "z")
        bridge.close(session)
        assert sample_csv.read_bytes() == b"a,b,c\n1,2,3\n"

    def test_close_twice(self, bridge, sample_csv):
        session = bridge.open(sample_csv).session
        bridge.close(session)
        bridge.close(session)
        assert session.state is SessionState.CLOSED

    def test_temp_file_kept_by_default(self, bridge, report):
        session = bridge.open(report).session
        bridge.close(session)
        assert session.temp_path.exists()

    def test_temp_file_removed_when_configured(self, fake_converter, report):
        bridge = TableBridge(BridgeOptions(remove_temp_on_close=True), converter=fake_converter, confirm=accept_all)
        session = bridge.open(report).session
        bridge.close(session)
        assert not session.temp_path.exists()
        assert report.exists()

    def test_close_all(self, bridge, sample_csv, report):
        bridge.open(sample_csv)
        bridge.open(report)
        assert len(bridge.sessions) == 2
        bridge.close_all()
        assert bridge.sessions == []


@pytest.mark.unit
class TestOpenTable:
    """Test the module-level convenience function."""

    def test_open_table_with_options(self, fake_converter, temp_dir):
        path = temp_dir / "data.csv"
        path.write_bytes(b"1,2\n3,4\n")
        bridge, result = open_table(path, header_skip_lines=0, converter_backend=fake_converter)
        assert isinstance(bridge, TableBridge)
        assert bridge.options.header_skip_lines == 0
        assert result.session.separator is Separator.COMMA
        assert bridge.get(path) is result.session

    def test_open_table_custom_surface(self, fake_converter, report):
        class RecordingSurface(GridSurface):
            pass

        _, result = open_table(
            report, confirm=accept_all, surface_factory=RecordingSurface, converter_backend=fake_converter
        )
        assert isinstance(result.session.surface, RecordingSurface)


@pytest.mark.unit
class TestSharedFiles:
    """A file is never owned by two live sessions."""

    def test_spreadsheet_refused_while_its_csv_is_open(self, fake_converter, report, temp_dir):
        csv_path = temp_dir / "report.csv"
        csv_path.write_bytes(b"a,b\n1,2\n")
        asked = []
        bridge = TableBridge(converter=fake_converter, confirm=lambda p: asked.append(p) or True)
        text = bridge.open(csv_path).session
        text.surface.set_cell(1, 1, "3")

        with pytest.raises(ValidationError) as exc_info:
            bridge.open(report)

        assert "report.csv" in str(exc_info.value)
        assert csv_path.read_bytes() == b"a,b\n1,2\n"
        assert asked == []
        assert fake_converter.calls == []
        assert bridge.sessions == [text]
        assert text.dirty

    def test_csv_refused_while_it_is_a_working_copy(self, bridge, report, temp_dir):
        spreadsheet = bridge.open(report).session

        with pytest.raises(ValidationError):
            bridge.open(temp_dir / "report.csv")

        assert bridge.sessions == [spreadsheet]

    def test_second_spreadsheet_with_same_stem_refused(self, bridge, report, temp_dir):
        bridge.open(report)
        other = temp_dir / "report.ods"
        other.write_bytes(b"x,y\n9,9\n")

        with pytest.raises(ValidationError):
            bridge.open(other)

        assert (temp_dir / "report.csv").read_bytes() == b"name,total\nwidgets,3\n"

    def test_allowed_after_close(self, bridge, report, temp_dir):
        csv_path = temp_dir / "report.csv"
        csv_path.write_bytes(b"a,b\n")
        bridge.close(bridge.open(csv_path).session)

        assert bridge.open(report).status is OpenStatus.OPENED

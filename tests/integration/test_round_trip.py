"""Integration tests: open, edit, save and close real spreadsheet files.

These use the in-process openpyxl/odfpy backend, so they run without
LibreOffice. A final class repeats the xlsx round trip through LibreOffice
when it is installed.
"""

import shutil

import pytest

from tabbridge import BridgeOptions, TableBridge, accept_all
from tabbridge.api import OpenStatus
from tabbridge.converters.ods import read_ods_rows, write_ods_rows
from tabbridge.converters.xlsx import read_xlsx_rows, write_xlsx_rows
from tabbridge.separator import Separator

INVENTORY = [["sku", "name", "stock"], ["A-1", "hinge", "40"], ["B-7", "bracket, steel", "5"]]


@pytest.fixture
def python_bridge():
    bridge = TableBridge(BridgeOptions(converter="python"), confirm=accept_all)
    yield bridge
    bridge.close_all()


@pytest.mark.integration
class TestSpreadsheetRoundTrip:
    """Round trips through the in-process backend."""

    @pytest.mark.parametrize(
        "extension,write,read", [("xlsx", write_xlsx_rows, read_xlsx_rows), ("ods", write_ods_rows, read_ods_rows)]
    )
    def test_edit_and_save(self, python_bridge, temp_dir, extension, write, read):
        path = temp_dir / f"inventory.{extension}"
        write(INVENTORY, path)

        session = python_bridge.open(path).session
        assert session.separator is Separator.COMMA
        assert session.surface.rows == INVENTORY

        session.surface.set_cell(2, 2, "4")
        session.surface.append_row(["C-3", "latch", "12"])
        assert python_bridge.save(session)

        expected = INVENTORY[:2] + [["B-7", "bracket, steel", "4"], ["C-3", "latch", "12"]]
        assert read(path) == expected
        assert session.temp_path.read_text(encoding="utf-8").splitlines()[2] == 'B-7,"bracket, steel",4'

    def test_reopen_after_close_sees_saved_values(self, python_bridge, temp_dir):
        path = temp_dir / "inventory.xlsx"
        write_xlsx_rows(INVENTORY, path)

        session = python_bridge.open(path).session
        session.surface.set_cell(1, 1, "hinge, brass")
        python_bridge.save(session)
        python_bridge.close(session)

        reopened = python_bridge.open(path)
        assert reopened.status is OpenStatus.OPENED
        assert reopened.session.surface.cell(1, 1) == "hinge, brass"

    def test_text_and_spreadsheet_sessions_side_by_side(self, python_bridge, temp_dir):
        xlsx_path = temp_dir / "inventory.xlsx"
        write_xlsx_rows(INVENTORY, xlsx_path)
        tsv_path = temp_dir / "notes.tsv"
        tsv_path.write_text("id\tnote\n1\tcheck stock\n", encoding="utf-8")

        spreadsheet = python_bridge.open(xlsx_path).session
        text = python_bridge.open(tsv_path).session
        assert {s.source_path for s in python_bridge.sessions} == {xlsx_path, tsv_path}

        text.surface.set_cell(1, 1, "done")
        python_bridge.save(text)
        assert tsv_path.read_text(encoding="utf-8") == "id\tnote\n1\tdone\n"
        assert not spreadsheet.dirty
        assert read_xlsx_rows(xlsx_path) == INVENTORY


@pytest.mark.integration
@pytest.mark.libreoffice
@pytest.mark.skipif(shutil.which("soffice") is None, reason="LibreOffice is not installed")
class TestLibreOfficeRoundTrip:
    """Round trip through a real LibreOffice installation."""

    def test_edit_and_save_xlsx(self, temp_dir):
        path = temp_dir / "inventory.xlsx"
        write_xlsx_rows(INVENTORY, path)
        bridge = TableBridge(confirm=accept_all)

        session = bridge.open(path).session
        session.surface.set_cell(1, 2, "41")
        bridge.save(session)
        bridge.close(session)

        assert read_xlsx_rows(path)[1] == ["A-1", "hinge", "41"]

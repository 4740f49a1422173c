from datetime import date, datetime, timedelta, timezone

import pytest

from core.enums import RecordStatus
from core.models import Binding, RecordInfo, TemplateBindings
from stages.s2_template import ReportWorkbook
from stages.s5_population import SheetJob, SheetPopulator, resolve_binding

from conftest import make_template


def test_resolve_plain_binding():
    values = {"status": "Active", "count": 3}

    assert resolve_binding(Binding(row=1, col=1, path="status"), values) == "Active"
    assert resolve_binding(Binding(row=1, col=1, path="count"), values) == 3
    assert resolve_binding(Binding(row=1, col=1, path="absent"), values) == ""


def test_resolve_condition_is_case_insensitive():
    values = {"status": "Active"}

    assert resolve_binding(Binding(row=1, col=1, path="status", condition="active"), values) == 1
    assert resolve_binding(Binding(row=1, col=1, path="status", condition="inactive"), values) == ""
    assert resolve_binding(Binding(row=1, col=1, path="absent", condition="active"), values) == ""


def test_resolve_condition_on_numbers():
    values = {"year": 2015, "total": 15.0, "flag": 1}

    assert resolve_binding(Binding(row=1, col=1, path="year", condition="2015"), values) == 1
    assert resolve_binding(Binding(row=1, col=1, path="total", condition="15"), values) == 1
    assert resolve_binding(Binding(row=1, col=1, path="flag", condition="1"), values) == 1


def test_to_sheet_value():
    aware = datetime(2020, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    assert SheetPopulator.to_sheet_value("") is None
    assert SheetPopulator.to_sheet_value(aware) == datetime(2020, 1, 1, 10, 0)
    assert SheetPopulator.to_sheet_value(date(2020, 1, 1)) == date(2020, 1, 1)
    assert SheetPopulator.to_sheet_value(0) == 0


def _job(workbook: ReportWorkbook, name: str, values: dict) -> SheetJob:
    return SheetJob(
        record=RecordInfo(identifier=f"DOC-{name}", government=name.lower()[:2], name=name),
        values=values,
        workbook=workbook,
        bindings=TemplateBindings(
            sheet_name="{{template}}",
            bindings=[
                Binding(row=1, col=1, path="government.title"),
                Binding(row=2, col=1, path="status", condition="active"),
                Binding(row=3, col=1, path="missing"),
            ],
        ),
    )


@pytest.mark.asyncio
async def test_populator_writes_sheet_and_menu():
    workbook = ReportWorkbook(make_template({
        "A1": "{{government.title}}",
        "A2": "{{status=active}}",
        "A3": "{{missing}}",
        "B1": "Label",
    }))

    result = await SheetPopulator().execute(_job(workbook, "Canada", {
        "government.title": "Canada",
        "status": "ACTIVE",
    }))

    assert result.status == RecordStatus.CREATED
    assert result.bindings_written == 3
    assert result.values_mapped == 2

    sheet = workbook.workbook["Canada"]
    assert sheet["A1"].value == "Canada"
    assert sheet["A2"].value == 1
    assert sheet["A3"].value is None
    assert sheet["B1"].value == "Label"
    assert workbook.menu["B3"].value == "Canada"

    # The template itself is never written
    assert workbook.template["A1"].value == "{{government.title}}"


@pytest.mark.asyncio
async def test_populator_skips_existing_sheet():
    workbook = ReportWorkbook(make_template())
    workbook.workbook.create_sheet("Canada")

    result = await SheetPopulator().execute(_job(workbook, "Canada", {}))

    assert result.status == RecordStatus.SKIPPED
    assert workbook.menu["B3"].value is None

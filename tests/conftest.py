import copy
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx
import pytest
from openpyxl import Workbook

from catalog.client import CatalogClient
from stages.s0_terms import TermDirectory


BASE_URL = "https://catalog.test"

SHAPE = {
    "internationalResources": {
        "baselineData": {},
        "progressData": {},
    },
    "domesticExpendituresData": {},
    "fundingNeedsData": {},
    "nationalPlansData": {},
}


def make_record(**extra) -> dict:
    """Smallest record the normalizer accepts, plus top-level extras"""
    record = copy.deepcopy(SHAPE)
    record.update(extra)
    return record


def make_template(cells: Optional[Dict[str, object]] = None) -> Workbook:
    """Workbook with a MENU sheet and a {{template}} sheet holding `cells`"""
    workbook = Workbook()
    menu = workbook.active
    menu.title = "MENU"
    menu["B1"] = "Reports"

    template = workbook.create_sheet("{{template}}")
    for address, value in (cells or {}).items():
        template[address] = value
    return workbook


def mock_client(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> CatalogClient:
    kwargs.setdefault("retry_delay", 0)
    return CatalogClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def terms() -> TermDirectory:
    return TermDirectory.from_titles({
        "ca": "Canada",
        "fr": "France",
        "XAF": "CFA Franc BEAC",
    })


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    workbook = make_template({
        "A1": "{{government.title}}",
        "A2": "  {{government.ca.title}}  ",
        "A3": "{{nationalPlansData.domesticSources.amount2014}}",
        "A4": "{{status=active}}",
        "A5": "{{status=inactive}}",
        "A6": "Notes",
        "B1": "prefix {{government.title}}",
        "B2": "{{missing.path}}",
    })
    path = tmp_path / "template.xlsx"
    workbook.save(path)
    return path

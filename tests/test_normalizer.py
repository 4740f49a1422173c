import copy

import pytest

from core.enums import DiagnosticKind
from core.exceptions import StructuralShapeError
from stages.s3_normalization import RecordNormalizer
from stages.s4_flattening import PathFlattener

from conftest import make_record


def test_key_by_year_drops_missing_elements(terms):
    normalizer = RecordNormalizer(terms)
    diagnostics = []

    keyed = normalizer.key_by(
        [{"year": 2014, "a": 1}, {"a": 3}, {"year": 2015, "a": 2}],
        "year",
        "flows",
        diagnostics,
    )

    assert keyed == {
        "2014": {"year": 2014, "a": 1},
        "2015": {"year": 2015, "a": 2},
    }
    assert [d.kind for d in diagnostics] == [DiagnosticKind.MISSING_KEY_FIELD]
    assert diagnostics[0].path == "flows[1]"


def test_key_by_never_uses_blank_slots(terms):
    normalizer = RecordNormalizer(terms)

    keyed = normalizer.key_by(
        [{"identifier": ""}, {"identifier": None}, {"identifier": True}, "text", {"identifier": "a"}],
        "identifier",
    )

    assert list(keyed) == ["a"]


def test_key_by_later_duplicate_wins(terms):
    normalizer = RecordNormalizer(terms)

    keyed = normalizer.key_by([{"year": 2014, "a": 1}, {"year": "2014", "a": 2}], "year")

    assert keyed == {"2014": {"year": "2014", "a": 2}}


def test_aggregate_sums_each_year(terms):
    normalizer = RecordNormalizer(terms)
    sources = [{"amount2014": 10}, {"amount2014": 5, "amount2015": 2}]

    wrapped = normalizer.aggregate(sources)

    assert wrapped["sources"] == sources
    assert wrapped["amount2014"] == 15
    assert wrapped["amount2015"] == 2
    for year in range(2016, 2021):
        assert wrapped[f"amount{year}"] == 0


def test_aggregate_warns_on_invalid_amounts(terms):
    normalizer = RecordNormalizer(terms)
    diagnostics = []

    wrapped = normalizer.aggregate(
        [{"amount2014": "12.5"}, {"amount2014": "n/a"}, {"amount2014": 0.25}],
        "plans",
        diagnostics,
    )

    assert wrapped["amount2014"] == 12.75
    assert len(diagnostics) == 1
    assert diagnostics[0].kind == DiagnosticKind.INVALID_AMOUNT
    assert diagnostics[0].path == "plans.sources[1].amount2014"


def test_normalize_resolves_terms_and_aliases(terms):
    record = make_record(government={"identifier": "ca"})

    result = RecordNormalizer(terms).normalize(record)

    assert result.tree["government"] == {"identifier": "ca", "title": "Canada"}
    alias = result.aliases.get(result.tree["government"])
    assert alias.identifier == "ca"
    assert alias.snapshot == {"identifier": "ca", "title": "Canada"}


def test_unknown_identifier_keeps_alias_without_title(terms):
    record = make_record(currency={"identifier": "ZZZ"})

    result = RecordNormalizer(terms).normalize(record)

    assert "title" not in result.tree["currency"]
    assert result.aliases.get(result.tree["currency"]).identifier == "ZZZ"


def test_root_identifier_is_not_a_term(terms):
    record = make_record(identifier="ca", government={"identifier": "ca"})

    result = RecordNormalizer(terms).normalize(record)
    values = PathFlattener().flatten(result)

    assert "title" not in result.tree
    assert result.aliases.get(result.tree) is None
    assert len(result.aliases) == 1
    assert values["identifier"] == "ca"
    assert not any(path.startswith("ca.") or path == "ca" for path in values)
    assert values["government.ca.title"] == "Canada"


def test_invalid_identifier_type_is_a_warning(terms):
    record = make_record(government={"identifier": 5})

    result = RecordNormalizer(terms).normalize(record)

    assert result.tree["government"] == {"identifier": 5}
    assert len(result.aliases) == 0
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.INVALID_IDENTIFIER_TYPE]
    assert result.diagnostics[0].path == "government"


def test_normalize_rekeys_and_aggregates(terms):
    record = make_record()
    record["internationalResources"]["baselineData"] = {
        "baselineFlows": [{"year": 2014, "amount": 1}],
        "odaCategories": [{"identifier": "XAF", "amount": 3}],
    }
    record["nationalPlansData"]["domesticSources"] = [{"amount2014": 4}]

    tree = RecordNormalizer(terms).normalize(record).tree

    baseline = tree["internationalResources"]["baselineData"]
    assert baseline["baselineFlows"] == {"2014": {"year": 2014, "amount": 1}}
    assert baseline["odaCategories"]["XAF"]["title"] == "CFA Franc BEAC"
    assert baseline["odaoofActions"] == {}
    assert tree["fundingNeedsData"]["annualEstimates"] == {}
    assert tree["nationalPlansData"]["domesticSources"]["amount2014"] == 4
    assert tree["nationalPlansData"]["internationalSources"]["sources"] == []


def test_alias_follows_rekeyed_element(terms):
    record = make_record()
    record["internationalResources"]["baselineData"] = {
        "odaCategories": [{"identifier": "XAF", "amount": 3}],
    }

    values = PathFlattener().flatten(RecordNormalizer(terms).normalize(record))

    prefix = "internationalResources.baselineData.odaCategories.XAF"
    assert values[f"{prefix}.amount"] == 3
    assert values[f"{prefix}.XAF.title"] == "CFA Franc BEAC"


def test_normalize_leaves_input_untouched(terms):
    record = make_record(government={"identifier": "ca"})
    record["domesticExpendituresData"]["expenditures"] = [{"year": 2015}]
    original = copy.deepcopy(record)

    RecordNormalizer(terms).normalize(record)

    assert record == original


def test_normalize_is_idempotent(terms):
    record = make_record(government={"identifier": "ca"})
    record["internationalResources"]["progressData"]["progressFlows"] = [{"year": 2016, "amount": 9}]
    record["nationalPlansData"]["internationalSources"] = [{"amount2017": 1}]
    normalizer = RecordNormalizer(terms)

    first = normalizer.normalize(record)
    second = normalizer.normalize(first.tree)

    assert second.tree == first.tree
    assert second.diagnostics == []


def test_missing_container_is_a_shape_error(terms):
    record = make_record()
    del record["fundingNeedsData"]

    with pytest.raises(StructuralShapeError) as exc_info:
        RecordNormalizer(terms).normalize(record)

    assert exc_info.value.missing_paths == ["fundingNeedsData"]


def test_non_array_collection_is_a_shape_error(terms):
    record = make_record()
    record["domesticExpendituresData"]["expenditures"] = "none"

    with pytest.raises(StructuralShapeError):
        RecordNormalizer(terms).normalize(record)

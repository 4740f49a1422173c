"""Stage 3: Normalization - Reshape a raw record before flattening"""

import copy
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

import structlog

from core.interfaces import Stage, TermLookup
from core.models import Diagnostic
from core.enums import DiagnosticKind
from core.exceptions import StructuralShapeError
from config import settings
from utils.coercion import cell_text
from utils.paths import dotted, index_segment, key_segment

logger = structlog.get_logger(__name__)


BASELINE = ("internationalResources", "baselineData")
PROGRESS = ("internationalResources", "progressData")
EXPENDITURES = ("domesticExpendituresData",)
FUNDING_NEEDS = ("fundingNeedsData",)
NATIONAL_PLANS = ("nationalPlansData",)

# Containers that must exist before the record can be reshaped
REQUIRED_PARENTS = (BASELINE, PROGRESS, EXPENDITURES, FUNDING_NEEDS, NATIONAL_PLANS)

# (parent, field, key): arrays replaced by an object keyed on each element's field
KEYED_COLLECTIONS = (
    (BASELINE, "baselineFlows", "year"),
    (PROGRESS, "progressFlows", "year"),
    (EXPENDITURES, "expenditures", "year"),
    (FUNDING_NEEDS, "annualEstimates", "year"),
    (BASELINE, "odaCategories", "identifier"),
    (BASELINE, "odaoofActions", "identifier"),
    (BASELINE, "otherActions", "identifier"),
)

# Source lists wrapped with per-year totals
AGGREGATED_SOURCES = ("domesticSources", "internationalSources")


@dataclass(frozen=True)
class TermAlias:
    """Snapshot of a term sub-tree, exposed as <path>.<identifier>"""
    identifier: str
    snapshot: Dict[str, Any]


class TermAliasIndex:
    """
    Term snapshots kept alongside the record tree

    Entries are keyed by the identity of the aliased object, so the alias
    follows the object when re-keying moves it. The index is only valid for
    the tree it was built from.
    """

    def __init__(self):
        self._aliases: Dict[int, TermAlias] = {}
        self._nodes: List[dict] = []  # pins ids for the lifetime of the index

    def register(self, node: dict, identifier: str, snapshot: Dict[str, Any]) -> None:
        self._aliases[id(node)] = TermAlias(identifier=identifier, snapshot=snapshot)
        self._nodes.append(node)

    def get(self, node: Any) -> Optional[TermAlias]:
        return self._aliases.get(id(node))

    def __len__(self) -> int:
        return len(self._aliases)


@dataclass
class NormalizedRecord:
    """A record ready for flattening"""
    tree: Dict[str, Any]
    aliases: TermAliasIndex = field(default_factory=TermAliasIndex)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class RecordNormalizer(Stage[Dict[str, Any], NormalizedRecord]):
    """Stage 3: Resolve terms, re-key collections and aggregate sources"""

    @property
    def name(self) -> str:
        return "Record Normalization"

    @property
    def stage_number(self) -> int:
        return 3

    def __init__(self, terms: TermLookup, amount_fields: Optional[List[str]] = None):
        self.terms = terms
        self.amount_fields = amount_fields or settings.get_amount_fields()

    def validate_input(self, input_data: Dict[str, Any]) -> bool:
        return isinstance(input_data, dict)

    async def execute(self, input_data: Dict[str, Any]) -> NormalizedRecord:
        return self.normalize(input_data)

    def normalize(self, record: Dict[str, Any]) -> NormalizedRecord:
        """
        Normalize a raw record

        The input is left untouched; all changes are made on a deep copy.

        Raises:
            StructuralShapeError: If a required container is missing
        """
        if not isinstance(record, dict):
            raise StructuralShapeError(["<root>"])

        tree = copy.deepcopy(record)
        self._check_shape(tree)

        result = NormalizedRecord(tree=tree)
        result.aliases = self._resolve_terms(tree, result.diagnostics)
        self._rekey_collections(tree, result.diagnostics)
        self._aggregate_sources(tree, result.diagnostics)
        return result

    # ─────────────────────────────────────────────────────────
    # Shape
    # ─────────────────────────────────────────────────────────

    def _check_shape(self, tree: Dict[str, Any]) -> None:
        missing = [dotted(*parent) for parent in REQUIRED_PARENTS if self._parent(tree, parent) is None]
        if missing:
            raise StructuralShapeError(missing)

    @staticmethod
    def _parent(tree: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[Dict[str, Any]]:
        node: Any = tree
        for key in keys:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node if isinstance(node, dict) else None

    # ─────────────────────────────────────────────────────────
    # Step 1: terms
    # ─────────────────────────────────────────────────────────

    def _resolve_terms(self, tree: Dict[str, Any], diagnostics: List[Diagnostic]) -> TermAliasIndex:
        aliases = TermAliasIndex()
        pending: List[Tuple[dict, str]] = []

        # The record root itself is never a term
        descendants = (
            found
            for key, child in tree.items()
            for found in self._term_nodes(child, key_segment("", key))
        )

        for path, node in descendants:
            identifier = node["identifier"]

            if not isinstance(identifier, str):
                if identifier is not None:
                    self._warn(
                        diagnostics,
                        DiagnosticKind.INVALID_IDENTIFIER_TYPE,
                        f"Invalid identifier type {type(identifier).__name__}",
                        path,
                    )
                continue

            term = self.terms.lookup(identifier)
            if term is not None:
                node["title"] = term.title

            if identifier.strip():
                pending.append((node, identifier))

        # Snapshots are taken once every title is set
        for node, identifier in pending:
            aliases.register(node, identifier, copy.deepcopy(node))

        return aliases

    def _term_nodes(self, node: Any, path: str):
        """Yield (path, object) for every object with an identifier, in document order"""
        if isinstance(node, dict):
            if "identifier" in node:
                yield path, node
            for key, child in node.items():
                yield from self._term_nodes(child, key_segment(path, key))
        elif isinstance(node, list):
            for index, child in enumerate(node):
                yield from self._term_nodes(child, index_segment(path, index))

    # ─────────────────────────────────────────────────────────
    # Step 2: re-keying
    # ─────────────────────────────────────────────────────────

    def _rekey_collections(self, tree: Dict[str, Any], diagnostics: List[Diagnostic]) -> None:
        for parent_keys, field_name, key in KEYED_COLLECTIONS:
            parent = self._parent(tree, parent_keys)
            path = dotted(*parent_keys, field_name)
            items = parent.get(field_name)

            if isinstance(items, dict):
                continue  # already keyed

            parent[field_name] = self.key_by(items, key, path, diagnostics)

    def key_by(
        self,
        items: Any,
        key: str,
        path: str = "",
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Dict[str, Any]:
        """
        Re-key an array into an object using one field of each element

        Elements without the field are dropped. When two elements share a
        slot the later one wins.
        """
        if diagnostics is None:
            diagnostics = []
        if items is None:
            return {}
        if not isinstance(items, list):
            raise StructuralShapeError([path or "<collection>"])

        keyed: Dict[str, Any] = {}
        for index, item in enumerate(items):
            slot = self._slot(item.get(key)) if isinstance(item, dict) else None
            if slot is None:
                self._warn(
                    diagnostics,
                    DiagnosticKind.MISSING_KEY_FIELD,
                    f"`{key}` is not specified",
                    index_segment(path, index),
                )
                continue
            keyed[slot] = item
        return keyed

    @staticmethod
    def _slot(value: Any) -> Optional[str]:
        if value is None or isinstance(value, (bool, dict, list)):
            return None
        slot = cell_text(value)
        return slot if slot.strip() else None

    # ─────────────────────────────────────────────────────────
    # Step 3: aggregation
    # ─────────────────────────────────────────────────────────

    def _aggregate_sources(self, tree: Dict[str, Any], diagnostics: List[Diagnostic]) -> None:
        plans = self._parent(tree, NATIONAL_PLANS)

        for field_name in AGGREGATED_SOURCES:
            path = dotted(*NATIONAL_PLANS, field_name)
            current = plans.get(field_name)

            if isinstance(current, dict) and "sources" in current:
                continue  # already aggregated
            if current is None:
                current = []
            if not isinstance(current, list):
                raise StructuralShapeError([path])

            plans[field_name] = self.aggregate(current, path, diagnostics)

    def aggregate(
        self,
        sources: List[Any],
        path: str = "",
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Dict[str, Any]:
        """Wrap a source list with per-year amount totals"""
        if diagnostics is None:
            diagnostics = []

        totals = {name: Decimal(0) for name in self.amount_fields}

        for index, source in enumerate(sources):
            source_path = index_segment(key_segment(path, "sources"), index)

            if not isinstance(source, dict):
                self._warn(diagnostics, DiagnosticKind.INVALID_AMOUNT, "Source is not an object", source_path)
                continue

            for name in self.amount_fields:
                value = source.get(name)
                if value is None:
                    continue
                amount = self._to_decimal(value)
                if amount is None:
                    self._warn(
                        diagnostics,
                        DiagnosticKind.INVALID_AMOUNT,
                        f"`{name}` is not a number: {value!r}",
                        key_segment(source_path, name),
                    )
                    continue
                totals[name] += amount

        wrapped: Dict[str, Any] = {"sources": sources}
        for name, total in totals.items():
            wrapped[name] = self._number(total)
        return wrapped

    @staticmethod
    def _to_decimal(value: Any) -> Optional[Decimal]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            try:
                amount = Decimal(value.strip())
            except InvalidOperation:
                return None
        else:
            return None
        return amount if amount.is_finite() else None

    @staticmethod
    def _number(total: Decimal):
        if total == total.to_integral_value():
            return int(total)
        return float(total)

    # ─────────────────────────────────────────────────────────

    @staticmethod
    def _warn(diagnostics: List[Diagnostic], kind: DiagnosticKind, message: str, path: str = None) -> None:
        diagnostics.append(Diagnostic(kind=kind, message=message, path=path))
        logger.warning(message, kind=kind.value, path=path)

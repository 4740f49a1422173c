"""Stage 4: Flattening - Map every record node to a path and a cell value"""

from typing import Any, Optional, Union

import structlog

from core.interfaces import Stage
from core.models import ValueMap
from stages.s3_normalization import NormalizedRecord, TermAliasIndex
from utils.coercion import to_cell_value
from utils.paths import index_segment, key_segment

logger = structlog.get_logger(__name__)


class PathFlattener(Stage[NormalizedRecord, ValueMap]):
    """Stage 4: Build the path -> value map of one record"""

    @property
    def name(self) -> str:
        return "Path Flattening"

    @property
    def stage_number(self) -> int:
        return 4

    def validate_input(self, input_data: NormalizedRecord) -> bool:
        return isinstance(input_data, (NormalizedRecord, dict, list))

    async def execute(self, input_data: NormalizedRecord) -> ValueMap:
        return self.flatten(input_data)

    def flatten(self, record: Union[NormalizedRecord, dict, list]) -> ValueMap:
        """
        Flatten a record depth-first in document order

        Containers are written before their children: arrays as their
        length, objects as 1. Term aliases are written after the regular
        children of the aliased object, so they win on a path collision.

        Raises:
            UnsupportedTypeError: If a node cannot be converted to a cell value
        """
        if isinstance(record, NormalizedRecord):
            tree, aliases = record.tree, record.aliases
        else:
            tree, aliases = record, None

        values: ValueMap = {}
        collisions = self._walk(tree, "", aliases, values)

        if collisions:
            logger.debug("duplicate paths overwritten", count=collisions)
        return values

    def _visit(self, node: Any, path: str, aliases: Optional[TermAliasIndex], values: ValueMap) -> int:
        collisions = 1 if path in values else 0
        values[path] = to_cell_value(node, path)
        return collisions + self._walk(node, path, aliases, values)

    def _walk(self, node: Any, path: str, aliases: Optional[TermAliasIndex], values: ValueMap) -> int:
        """Visit the children of a node; returns the number of overwritten paths"""
        collisions = 0

        if isinstance(node, dict):
            for key, child in node.items():
                collisions += self._visit(child, key_segment(path, key), aliases, values)

            alias = aliases.get(node) if aliases is not None else None
            if alias is not None:
                collisions += self._visit(alias.snapshot, key_segment(path, alias.identifier), None, values)

        elif isinstance(node, (list, tuple)):
            for index, child in enumerate(node):
                collisions += self._visit(child, index_segment(path, index), aliases, values)

        return collisions

from .normalizer import RecordNormalizer, NormalizedRecord, TermAlias, TermAliasIndex

__all__ = ["RecordNormalizer", "NormalizedRecord", "TermAlias", "TermAliasIndex"]

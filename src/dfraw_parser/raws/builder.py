"""
Record builder for raw files.

A small state machine that consumes tokens and assembles records. All scope
(declared object type, open record, active caste) lives in an explicit
``ParserContext`` that each step takes and returns. The open record and the
active caste are addressed by index into collections the context owns.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from .dispatch import Reporter, TagScope, get_rule, is_dropped_tag
from .models import (
    ALL_CASTES_ID,
    CASTE_KEY,
    OBJECT_KEY,
    RECORD_TYPES,
    SELECT_CASTE_KEY,
    CasteRecord,
    CreatureRecord,
    RawFile,
    RawRecord,
)
from .tokenizer import Token, split_header, tokenize

# Caste index values that do not point at a caste
NO_CASTE = -1
CASTE_NOT_FOUND = -2
ALL_CASTES = -3


class BuilderState(Enum):
    """Coarse state of the builder, derived from the context."""
    NO_OBJECT = "no_object"
    IN_OBJECT = "in_object"
    IN_RECORD = "in_record"


@dataclass
class ParserContext:
    """Everything the builder knows about the file being parsed."""
    filename: str
    object_type: Optional[str] = None
    records: List[RawRecord] = field(default_factory=list)
    record_index: int = -1
    caste_index: int = NO_CASTE
    warnings: List[str] = field(default_factory=list)

    @property
    def state(self) -> BuilderState:
        if self.object_type is None:
            return BuilderState.NO_OBJECT
        if self.record_index < 0:
            return BuilderState.IN_OBJECT
        return BuilderState.IN_RECORD

    @property
    def current_record(self) -> Optional[RawRecord]:
        if self.record_index < 0:
            return None
        return self.records[self.record_index]

    @property
    def supports_object_type(self) -> bool:
        return self.object_type in RECORD_TYPES


class RawObjectBuilder:
    """Builds records from the tokens of a single raw file."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def build(self, text: str, path: Optional[Path] = None) -> RawFile:
        """Parse the full text of one raw file.

        Args:
            text: File content
            path: Where the text came from; its stem names the file when the
                  text has no header line

        Returns:
            RawFile with every finalized record in declaration order
        """
        header, body, first_line = split_header(text)
        filename = header or (path.stem if path else "unknown")

        context = ParserContext(filename=filename)
        context = self.run(context, tokenize(body, first_line))

        if context.object_type is None:
            context.warnings.append("no [OBJECT] tag found")
            self.logger.debug(f"{filename}: no [OBJECT] tag found")

        return RawFile(
            filename=filename,
            object_type=context.object_type,
            records=context.records,
            path=path,
            warnings=context.warnings,
        )

    def run(self, context: ParserContext, tokens: Iterable[Token]) -> ParserContext:
        """Feed every token through ``step`` and close the last record."""
        for token in tokens:
            context = self.step(context, token)
        return self.finish(context)

    def finish(self, context: ParserContext) -> ParserContext:
        """Finalize any open record at end of input."""
        return self._close_record(context)

    def step(self, context: ParserContext, token: Token) -> ParserContext:
        """Apply one token to the context and return the updated context."""
        key, value = token.key, token.value

        if key == OBJECT_KEY:
            context = self._close_record(context)
            if value not in RECORD_TYPES:
                message = f"no support for [OBJECT:{value}], skipping its records"
                context.warnings.append(message)
                self.logger.debug(f"{context.filename}: {message}")
            return replace(context, object_type=value)

        if key == context.object_type:
            if not context.supports_object_type:
                return context
            return self._open_record(self._close_record(context), value)

        record = context.current_record
        if record is None:
            return context

        if key == CASTE_KEY and isinstance(record, CreatureRecord):
            record.castes.append(CasteRecord(id=value))
            return replace(context, caste_index=len(record.castes) - 1)

        if key == SELECT_CASTE_KEY and isinstance(record, CreatureRecord):
            return replace(context, caste_index=self._select_caste(context, record, value, token))

        rule = get_rule(record.type, key)
        if rule is None:
            if not value and not is_dropped_tag(key) and isinstance(record, CreatureRecord):
                record.add_attribute_tag(key)
            return context

        report = self._reporter(context, record, token)
        if rule.scope is TagScope.RECORD:
            rule.apply(record, value, report)
            return context

        for caste in self._target_castes(context, record, token):
            rule.apply(caste, value, report)
        return context

    # === SCOPE HANDLING ===

    def _open_record(self, context: ParserContext, identifier: str) -> ParserContext:
        record_cls = RECORD_TYPES[context.object_type or ""]
        record = record_cls(filename=context.filename, type=context.object_type or "", id=identifier)
        context.records.append(record)
        return replace(context, record_index=len(context.records) - 1, caste_index=NO_CASTE)

    def _close_record(self, context: ParserContext) -> ParserContext:
        record = context.current_record
        if record is None:
            return context
        record.finalize()
        return replace(context, record_index=-1, caste_index=NO_CASTE)

    def _select_caste(
        self, context: ParserContext, record: CreatureRecord, caste_id: str, token: Token
    ) -> int:
        if caste_id == ALL_CASTES_ID:
            return ALL_CASTES
        index = record.find_caste(caste_id)
        if index < 0:
            self._reporter(context, record, token)(f"[SELECT_CASTE:{caste_id}] names no caste")
            return CASTE_NOT_FOUND
        return index

    def _target_castes(
        self, context: ParserContext, record: RawRecord, token: Token
    ) -> List[CasteRecord]:
        """Resolve the active caste index into the castes a tag applies to."""
        castes: List[CasteRecord] = getattr(record, "castes", [])
        report = self._reporter(context, record, token)

        if context.caste_index == ALL_CASTES:
            if not castes:
                report(f"[{token.key}] with SELECT_CASTE:ALL but no castes declared")
            return list(castes)
        if context.caste_index == CASTE_NOT_FOUND:
            report(f"[{token.key}] ignored, selected caste does not exist")
            return []
        if context.caste_index == NO_CASTE:
            report(f"[{token.key}] ignored, no active caste")
            return []
        return [castes[context.caste_index]]

    def _reporter(
        self, context: ParserContext, record: RawRecord, token: Token
    ) -> Reporter:
        def report(message: str) -> None:
            warning = f"line {token.line}: {message}"
            record.warnings.append(warning)
            self.logger.warning(f"{context.filename} {record.type}:{record.id} {warning}")

        return report

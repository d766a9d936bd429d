"""
Replacement orchestrator.

Composes the engine (parser, scorer, compliance gate, transformer, field
resolver) with the content repository and the suggestion provider to realize:

- single replace: compliance gate (fail fast) -> fetch -> deep replace -> persist + publish
- smart suggest: parse -> materialize missing replacements -> score -> compliance report
- smart replace: apply every supplied operation to one entry snapshot -> persist + publish once

Smart replace does not re-check compliance. Callers must drop operations the
preview reported as non-compliant before executing.
"""

from typing import AbstractSet, Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from ..engine.command_parser import parse_command
from ..engine.compliance import ComplianceValidator, KeywordComplianceValidator, check_compliance
from ..engine.confidence import score_confidence
from ..engine.deep_replace import deep_replace
from ..engine.entity_patterns import EntityPatternSet
from ..engine.field_updates import apply_field_updates_detailed, resolve_field_key
from ..shared.brand_config import BrandProfileStore
from ..shared.config import CONTENTSTACK_ENVIRONMENT, DEFAULT_LOCALE, get_protected_fields
from ..shared.errors import UpstreamError, ValidationError
from ..shared.llm_client import SuggestionProvider, build_suggestion_prompt
from ..shared.logger import get_logger
from ..shared.schema import (
    BrandStyleProfile,
    ComplianceVerdict,
    FieldUpdateOperation,
    OperationReport,
    ParsedCommand,
    ReplaceOperation,
    SmartReplaceResult,
    Suggestion,
)
from ..shared.utils import text_or_none
from .session import Session, SessionManager
from .storage.contentstack import ContentRepository

logger = get_logger("replacer", __name__)

T = TypeVar("T")
AnyOperation = Any  # ReplaceOperation | FieldUpdateOperation

# Credential rejected: drop the cached session so the next request logs in again.
_AUTH_FAILURE_CODES = (401, 403)


def _require(value: Optional[str], label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")
    return value


class ReplacementOrchestrator:
    """Runs the replace / smart-suggest / smart-replace flows against one entry."""

    def __init__(
        self,
        repository: ContentRepository,
        suggestions: SuggestionProvider,
        profiles: Optional[BrandProfileStore] = None,
        sessions: Optional[SessionManager] = None,
        validator: Optional[ComplianceValidator] = None,
        environment: str = CONTENTSTACK_ENVIRONMENT,
        protected_fields: Optional[AbstractSet[str]] = None,
        patterns: Optional[EntityPatternSet] = None,
    ) -> None:
        self.repository = repository
        self.suggestions = suggestions
        self.profiles = profiles or BrandProfileStore()
        self.sessions = sessions or SessionManager(repository.login)
        self.environment = environment
        self.protected_fields = protected_fields if protected_fields is not None else get_protected_fields()
        self.patterns = patterns
        self.validator = validator

    # ------------------------------------------------------------------
    # Collaborator plumbing
    # ------------------------------------------------------------------

    def _call(self, fn: Callable[[Session], T]) -> T:
        session = self.sessions.current()
        try:
            return fn(session)
        except UpstreamError as e:
            if e.status_code in _AUTH_FAILURE_CODES:
                self.sessions.invalidate(session)
            raise

    def _fetch(self, uid: str) -> Dict[str, Any]:
        return self._call(lambda s: self.repository.fetch(uid, s))

    @staticmethod
    def _locale_of(entry: Dict[str, Any]) -> str:
        # Read before any rewrite; locale is not a protected field.
        return entry.get("locale") or DEFAULT_LOCALE

    def _persist_and_publish(self, uid: str, entry: Dict[str, Any], locale: str) -> None:
        def _save(session: Session) -> None:
            self.repository.update(uid, entry, session)
            self.repository.publish(uid, [self.environment], [locale], session)

        self._call(_save)

    def _compliance_gate(self) -> Tuple[BrandStyleProfile, ComplianceValidator]:
        """Profile and validator from one brand kit read, so marker edits apply without a restart."""
        profile, markers = self.profiles.load_with_markers()
        return profile, self.validator or KeywordComplianceValidator(markers)

    @staticmethod
    def _context_of(entry: Dict[str, Any]) -> Optional[str]:
        return text_or_none(entry.get("body"))

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggest_replacement(self, find_text: str, context: Optional[str]) -> Suggestion:
        """Ask the provider for a replacement and score it. Failures yield no suggestion."""
        try:
            text = self.suggestions.generate(build_suggestion_prompt(find_text, context))
        except Exception as e:  # provider failures degrade to "no suggestion"
            logger.warning(
                "Suggestion provider failed",
                extra={"payload": {"find_text": find_text, "error": str(e)}},
                exc_info=True,
            )
            return Suggestion.unavailable()
        if not text:
            return Suggestion.unavailable()
        confidence = score_confidence(text, context, find_text)
        logger.info("Suggestion generated", extra={"payload": {"confidence": confidence}})
        return Suggestion(suggestion=text, confidence=confidence)

    def suggest(self, uid: str, find_text: str) -> Suggestion:
        """Suggest a replacement for find_text using the entry body as context."""
        _require(uid, "uid")
        _require(find_text, "findText")
        entry = self._fetch(uid)
        return self.suggest_replacement(find_text, self._context_of(entry))

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def list_entries(self) -> List[Dict[str, Any]]:
        return self._call(self.repository.list_entries)

    def replace(self, uid: str, find_text: str, replace_text: str) -> Dict[str, Any]:
        """
        Single replace. Compliance is checked before anything is fetched.

        Raises:
            ValidationError: Missing uid, findText or replaceText.
            ComplianceError: replaceText rejected by the brand gate (no mutation).
            UpstreamError: Content API failure.
        """
        _require(uid, "uid")
        _require(find_text, "findText")
        _require(replace_text, "replaceText")

        profile, validator = self._compliance_gate()
        check_compliance(replace_text, profile, validator)

        entry = self._fetch(uid)
        locale = self._locale_of(entry)
        updated = deep_replace(entry, find_text, replace_text, self.patterns, self.protected_fields)
        self._persist_and_publish(uid, updated, locale)
        logger.info("Replace applied", extra={"payload": {"uid": uid}})
        return updated

    def resolve_operations(
        self,
        command: Optional[str] = None,
        operations: Optional[Sequence[AnyOperation]] = None,
    ) -> ParsedCommand:
        """Turn a free-text command or an explicit operation list into a ParsedCommand."""
        if command is not None and command.strip():
            parsed = parse_command(command)
            if not parsed.is_valid:
                raise ValidationError("Could not understand the command; no operations found")
            return parsed
        if operations:
            return ParsedCommand(original_input="", operations=list(operations))
        raise ValidationError("command or operations is required")

    def _materialize(
        self,
        operation: AnyOperation,
        entry: Dict[str, Any],
        context: Optional[str],
    ) -> OperationReport:
        if operation.replacement is not None:
            return OperationReport(operation=operation, source="explicit")

        if isinstance(operation, ReplaceOperation):
            suggestion = self.suggest_replacement(operation.find_text, context)
            update_field = "replace_text"
        else:
            key = resolve_field_key(operation.field_name, entry, self.protected_fields)
            current = text_or_none(entry.get(key)) or operation.field_name
            suggestion = self.suggest_replacement(current, context)
            update_field = "new_value"

        if not suggestion.available:
            return OperationReport(operation=operation, confidence=0, source="none")
        return OperationReport(
            operation=operation.model_copy(update={update_field: suggestion.suggestion}),
            confidence=suggestion.confidence,
            source="ai",
        )

    def smart_suggest(
        self,
        uid: str,
        command: Optional[str] = None,
        operations: Optional[Sequence[AnyOperation]] = None,
    ) -> List[OperationReport]:
        """Preview: materialize replacements, score them and report compliance. Persists nothing."""
        _require(uid, "uid")
        parsed = self.resolve_operations(command, operations)
        entry = self._fetch(uid)
        context = self._context_of(entry)
        profile, validator = self._compliance_gate()

        reports: List[OperationReport] = []
        for operation in parsed.operations:
            report = self._materialize(operation, entry, context)
            replacement = report.operation.replacement
            if replacement is None:
                report.compliance = ComplianceVerdict(accepted=False, reason="No replacement available")
            else:
                report.compliance = validator.validate(replacement, profile)
            reports.append(report)

        logger.info(
            "Smart suggest prepared",
            extra={"payload": {"uid": uid, "operation_count": len(reports)}},
        )
        return reports

    def smart_replace(self, uid: str, operations: Sequence[AnyOperation]) -> SmartReplaceResult:
        """
        Apply all operations to one fetched entry, then persist and publish once.

        Replace operations run in order through the transformer; field updates
        are batched into a single resolver call afterwards. Field updates that
        resolve to a protected key are dropped and reported in `skipped`.
        """
        _require(uid, "uid")
        if not operations:
            raise ValidationError("operations is required")
        for operation in operations:
            if operation.replacement is None:
                target = operation.find_text if isinstance(operation, ReplaceOperation) else operation.field_name
                raise ValidationError(f"Operation for '{target}' has no replacement")

        entry = self._fetch(uid)
        locale = self._locale_of(entry)
        field_updates: Dict[str, Any] = {}
        for operation in operations:
            if isinstance(operation, ReplaceOperation):
                entry = deep_replace(
                    entry, operation.find_text, operation.replace_text, self.patterns, self.protected_fields
                )
            elif isinstance(operation, FieldUpdateOperation):
                field_updates[operation.field_name] = operation.new_value
        skipped: List[str] = []
        if field_updates:
            entry, skipped = apply_field_updates_detailed(entry, field_updates, self.protected_fields)

        self._persist_and_publish(uid, entry, locale)
        applied = sum(
            1
            for operation in operations
            if not (isinstance(operation, FieldUpdateOperation) and operation.field_name in skipped)
        )
        logger.info(
            "Smart replace applied",
            extra={"payload": {"uid": uid, "applied": applied, "skipped": skipped}},
        )
        return SmartReplaceResult(entry=entry, applied=applied, skipped=skipped)

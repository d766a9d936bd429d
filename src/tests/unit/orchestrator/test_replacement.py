"""
Tests for the replacement orchestrator flows.

The content repository and suggestion provider are Mock doubles; the engine
(parser, transformer, scorer, compliance gate) runs for real.
"""

from unittest.mock import ANY, Mock

import pytest

from src.engine.compliance import ComplianceValidator
from src.orchestrator.replacement import ReplacementOrchestrator
from src.orchestrator.session import SessionManager
from src.shared.errors import ComplianceError, UpstreamError, ValidationError
from src.shared.schema import ComplianceVerdict, FieldUpdateOperation, ReplaceOperation


class TestReplace:
    def test_replace_persists_and_publishes(self, orchestrator, mock_repository):
        updated = orchestrator.replace("e1", "John Smith", "Jane Doe")

        assert updated["title"] == "Report by Jane Doe"
        assert updated["body"] == "Contact Jane Doe at john@x.com"
        assert updated["uid"] == "e1"
        mock_repository.update.assert_called_once_with("e1", updated, ANY)
        mock_repository.publish.assert_called_once_with("e1", ["production"], ["en-us"], ANY)

    def test_session_passed_explicitly(self, orchestrator, mock_repository):
        orchestrator.replace("e1", "John Smith", "Jane Doe")
        session = mock_repository.fetch.call_args.args[1]
        assert session.authtoken == "token-123"
        mock_repository.login.assert_called_once()

    def test_compliance_rejection_happens_before_fetch(self, orchestrator, mock_repository):
        with pytest.raises(ComplianceError):
            orchestrator.replace("e1", "John Smith", "Hey this is so cool and awesome right now!")
        mock_repository.fetch.assert_not_called()
        mock_repository.update.assert_not_called()

    @pytest.mark.parametrize(
        "uid, find_text, replace_text",
        [("", "a", "b"), ("e1", "", "b"), ("e1", "a", None), ("e1", "a", "  ")],
    )
    def test_missing_inputs(self, orchestrator, mock_repository, uid, find_text, replace_text):
        with pytest.raises(ValidationError):
            orchestrator.replace(uid, find_text, replace_text)
        mock_repository.fetch.assert_not_called()

    def test_auth_failure_invalidates_session(self, orchestrator, mock_repository):
        mock_repository.fetch.side_effect = UpstreamError("unauthorized", status_code=401)
        with pytest.raises(UpstreamError):
            orchestrator.replace("e1", "John Smith", "Jane Doe")
        assert orchestrator.sessions.session is None

    def test_other_upstream_failure_keeps_session(self, orchestrator, mock_repository):
        mock_repository.fetch.side_effect = UpstreamError("boom", status_code=500)
        with pytest.raises(UpstreamError):
            orchestrator.replace("e1", "John Smith", "Jane Doe")
        assert orchestrator.sessions.session is not None


class TestSuggest:
    def test_suggest_scores_provider_output(self, orchestrator, mock_provider):
        suggestion = orchestrator.suggest("e1", "Acme")
        assert suggestion.suggestion == "Globex"
        assert suggestion.confidence == 90
        prompt = mock_provider.generate.call_args.args[0]
        assert "Acme" in prompt
        assert "Contact John Smith at john@x.com" in prompt

    def test_provider_failure_means_no_suggestion(self, orchestrator, mock_provider):
        mock_provider.generate.side_effect = UpstreamError("model down", status_code=503)
        suggestion = orchestrator.suggest("e1", "Acme")
        assert suggestion.available is False
        assert suggestion.confidence == 0

    def test_empty_provider_output_means_no_suggestion(self, orchestrator, mock_provider):
        mock_provider.generate.return_value = None
        assert orchestrator.suggest("e1", "Acme").suggestion is None


class TestSmartSuggest:
    def test_command_with_missing_replacement_gets_ai_value(self, orchestrator, mock_repository):
        reports = orchestrator.smart_suggest("e1", command='replace "Acme" with "" and set title to "New Title"')

        assert [r.source for r in reports] == ["ai", "explicit"]
        assert reports[0].operation.replace_text == "Globex"
        assert reports[0].confidence == 90
        assert reports[0].compliance.accepted is True
        assert reports[1].operation.new_value == "New Title"
        assert reports[1].confidence is None
        mock_repository.update.assert_not_called()
        mock_repository.publish.assert_not_called()

    def test_report_wire_shape(self, orchestrator):
        report = orchestrator.smart_suggest("e1", command='set title to "New Title"')[0]
        assert report.to_dict() == {
            "operation": {"type": "field_update", "fieldName": "title", "newValue": "New Title"},
            "confidence": None,
            "source": "explicit",
            "compliance": {"accepted": True, "reason": "Short text is exempt from brand style review"},
        }

    def test_field_update_suggestion_uses_current_value(self, orchestrator, mock_provider):
        orchestrator.smart_suggest("e1", operations=[FieldUpdateOperation(field_name="heading")])
        prompt = mock_provider.generate.call_args.args[0]
        assert "Report by John Smith" in prompt

    def test_unavailable_suggestion_reported_non_compliant(self, orchestrator, mock_provider):
        mock_provider.generate.side_effect = RuntimeError("no model")
        reports = orchestrator.smart_suggest("e1", operations=[ReplaceOperation(find_text="Acme")])
        assert reports[0].source == "none"
        assert reports[0].confidence == 0
        assert reports[0].compliance.accepted is False

    def test_unparseable_command_rejected(self, orchestrator, mock_repository):
        with pytest.raises(ValidationError):
            orchestrator.smart_suggest("e1", command="make it better")
        mock_repository.fetch.assert_not_called()

    def test_command_or_operations_required(self, orchestrator):
        with pytest.raises(ValidationError):
            orchestrator.smart_suggest("e1")


class TestSmartReplace:
    def test_operations_applied_in_order_then_published_once(self, orchestrator, mock_repository):
        mock_repository.fetch.side_effect = lambda uid, session: {"uid": "e1", "title": "Old", "body": "Acme rocks"}
        operations = [
            ReplaceOperation(find_text="Acme", replace_text="Globex"),
            ReplaceOperation(find_text="Globex", replace_text="Initech"),
            FieldUpdateOperation(field_name="heading", new_value="New"),
        ]

        result = orchestrator.smart_replace("e1", operations)

        assert result.entry == {"uid": "e1", "title": "New", "body": "Initech rocks"}
        assert result.applied == 3
        assert result.skipped == []
        mock_repository.fetch.assert_called_once()
        mock_repository.update.assert_called_once_with("e1", result.entry, ANY)
        mock_repository.publish.assert_called_once_with("e1", ["production"], ["en-us"], ANY)

    def test_operation_without_replacement_rejected(self, orchestrator, mock_repository):
        operations = [
            ReplaceOperation(find_text="Acme", replace_text="Globex"),
            FieldUpdateOperation(field_name="title"),
        ]
        with pytest.raises(ValidationError, match="'title' has no replacement"):
            orchestrator.smart_replace("e1", operations)
        mock_repository.fetch.assert_not_called()

    def test_empty_operations_rejected(self, orchestrator):
        with pytest.raises(ValidationError):
            orchestrator.smart_replace("e1", [])

    def test_protected_fields_survive(self, orchestrator, mock_repository):
        result = orchestrator.smart_replace(
            "e1",
            [
                ReplaceOperation(find_text="e1", replace_text="e2"),
                FieldUpdateOperation(field_name="uid", new_value="hacked"),
            ],
        )
        assert result.entry["uid"] == "e1"
        assert result.entry["_version"] == 3
        assert result.applied == 1
        assert result.skipped == ["uid"]


def test_brand_kit_markers_reloaded_per_request(orchestrator, mock_profiles, formal_profile):
    text = "Kindly review the attached quarterly report"
    mock_profiles.load_with_markers.side_effect = [
        (formal_profile, {}),
        (formal_profile, {"politeness": ["kindly"]}),
    ]

    with pytest.raises(ComplianceError):
        orchestrator.replace("e1", "John Smith", text)
    orchestrator.replace("e1", "John Smith", text)

    assert mock_profiles.load_with_markers.call_count == 2


def test_explicit_validator_overrides_brand_kit_markers(mock_repository, mock_provider, mock_profiles):
    validator = Mock(spec=ComplianceValidator)
    validator.validate.return_value = ComplianceVerdict(accepted=False, reason="closed")
    orchestrator = ReplacementOrchestrator(
        repository=mock_repository,
        suggestions=mock_provider,
        profiles=mock_profiles,
        sessions=SessionManager(mock_repository.login),
        validator=validator,
    )
    with pytest.raises(ComplianceError, match="closed"):
        orchestrator.replace("e1", "John Smith", "Jane Doe")


class TestPublishLocale:
    """The publish locale comes from the fetched entry, never from rewritten text."""

    @pytest.fixture
    def english_entry(self, mock_repository):
        mock_repository.fetch.side_effect = lambda uid, session: {
            "uid": "e1",
            "locale": "en-us",
            "body": "Read it in en",
        }

    def test_replace_publishes_to_original_locale(self, orchestrator, mock_repository, english_entry):
        orchestrator.replace("e1", "en", "fr")

        persisted = mock_repository.update.call_args.args[1]
        assert persisted["body"] == "Read it in fr"
        mock_repository.publish.assert_called_once_with("e1", ["production"], ["en-us"], ANY)

    def test_smart_replace_publishes_to_original_locale(self, orchestrator, mock_repository, english_entry):
        orchestrator.smart_replace(
            "e1",
            [
                ReplaceOperation(find_text="us", replace_text="usa"),
                FieldUpdateOperation(field_name="locale", new_value="de-de"),
            ],
        )
        mock_repository.publish.assert_called_once_with("e1", ["production"], ["en-us"], ANY)

    def test_missing_locale_defaults(self, orchestrator, mock_repository):
        mock_repository.fetch.side_effect = lambda uid, session: {"uid": "e1", "body": "Acme"}
        orchestrator.replace("e1", "Acme", "Globex")
        mock_repository.publish.assert_called_once_with("e1", ["production"], ["en-us"], ANY)

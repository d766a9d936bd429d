"""
Replacement API endpoints.

Provides endpoints for:
- Listing entries
- Parsing free-text edit commands
- AI replacement suggestions with confidence
- Single find/replace (brand compliance enforced)
- Smart multi-operation preview and execution
"""

from typing import Any, Dict, List, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError as SchemaValidationError

from ...engine.command_parser import parse_command
from ...shared.errors import ComplianceError, UpstreamError, ValidationError
from ...shared.logger import get_logger
from ...shared.schema import parse_operations
from ..replacement import ReplacementOrchestrator

logger = get_logger("replacer", __name__)

# Flask Blueprint for replacement routes
replace_bp = Blueprint("replace", __name__)

ORCHESTRATOR_EXTENSION = "replacement_orchestrator"


def _get_orchestrator() -> ReplacementOrchestrator:
    """Get the orchestrator registered on the current app."""
    return current_app.extensions[ORCHESTRATOR_EXTENSION]


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _string_field(data: Dict[str, Any], key: str) -> Optional[str]:
    """Return data[key] when absent or a string; any other JSON type is a 400."""
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _operations_from(data: Dict[str, Any]) -> List[Any]:
    raw = data.get("operations")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("operations must be a list")
    try:
        return parse_operations(raw)
    except SchemaValidationError as e:
        raise ValidationError(f"Invalid operations: {e.errors(include_url=False)}") from e


@replace_bp.errorhandler(ValidationError)
def _handle_validation(e: ValidationError):
    return jsonify({"error": str(e)}), 400


@replace_bp.errorhandler(ComplianceError)
def _handle_compliance(e: ComplianceError):
    logger.info("Replacement rejected by brand compliance", extra={"payload": {"reason": e.reason}})
    return jsonify({"error": "Brand compliance check failed", "reason": e.reason}), 422


@replace_bp.errorhandler(UpstreamError)
def _handle_upstream(e: UpstreamError):
    logger.error(f"Upstream failure: {e}", extra={"payload": {"status_code": e.status_code}})
    return jsonify({"error": "Upstream service failed"}), 502


@replace_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"}), 200


@replace_bp.route("/entries", methods=["GET"])
def list_entries():
    """List entries of the configured content type."""
    return jsonify(_get_orchestrator().list_entries()), 200


@replace_bp.route("/parse", methods=["POST"])
def parse():
    """Parse a free-text command.

    Request body (JSON):
        {"text": str}

    Response:
        {"originalInput": str, "operations": [...], "isValid": bool}
    """
    parsed = parse_command(_string_field(_body(), "text"))
    return jsonify(parsed.model_dump(by_alias=True)), 200


@replace_bp.route("/suggest", methods=["POST"])
def suggest():
    """Suggest a replacement for findText using the entry body as context.

    Request body (JSON):
        {"uid": str, "findText": str}

    Response:
        {"suggestion": str, "confidence": int}

    Errors:
        400: uid or findText missing
        500: no suggestion could be generated
    """
    data = _body()
    uid, find_text = _string_field(data, "uid"), _string_field(data, "findText")
    if not uid or not find_text:
        return jsonify({"error": "uid and findText are required"}), 400

    result = _get_orchestrator().suggest(uid, find_text)
    if not result.available:
        return jsonify({"error": "Could not generate suggestion"}), 500
    return jsonify(result.model_dump()), 200


@replace_bp.route("/replace", methods=["POST"])
def replace():
    """Replace findText with replaceText across the entry, then publish.

    Request body (JSON):
        {"uid": str, "findText": str, "replaceText": str}

    Errors:
        400: missing fields
        422: replaceText rejected by brand compliance (entry untouched)
        502: content API failure
    """
    data = _body()
    uid = _string_field(data, "uid")
    find_text = _string_field(data, "findText")
    replace_text = _string_field(data, "replaceText")
    if not uid or not find_text or not replace_text:
        return jsonify({"error": "uid, findText and replaceText are required"}), 400

    _get_orchestrator().replace(uid, find_text, replace_text)
    return jsonify({"message": "Entry updated successfully"}), 200


@replace_bp.route("/smart-suggest", methods=["POST"])
def smart_suggest():
    """Preview a command: materialize replacements, score and check compliance.

    Request body (JSON):
        {"uid": str, "command": str} or {"uid": str, "operations": [...]}

    Response:
        {"operations": [{"operation": {...}, "confidence": int|null,
                         "source": "explicit"|"ai"|"none",
                         "compliance": {"accepted": bool, "reason": str}}]}
    """
    data = _body()
    reports = _get_orchestrator().smart_suggest(
        _string_field(data, "uid"),
        command=_string_field(data, "command"),
        operations=_operations_from(data),
    )
    return jsonify({"operations": [report.to_dict() for report in reports]}), 200


@replace_bp.route("/smart-replace", methods=["POST"])
def smart_replace():
    """Apply resolved operations to the entry and publish once.

    Compliance is not re-checked here; send only operations the preview accepted.

    Request body (JSON):
        {"uid": str, "operations": [{"type": "replace", "findText", "replaceText"}
                                    | {"type": "field_update", "fieldName", "newValue"}]}

    Response:
        {"message": str, "applied": int, "skipped": [fieldName, ...]}
    """
    data = _body()
    operations = _operations_from(data)
    result = _get_orchestrator().smart_replace(_string_field(data, "uid"), operations)
    return jsonify(
        {"message": "Entry updated successfully", "applied": result.applied, "skipped": result.skipped}
    ), 200

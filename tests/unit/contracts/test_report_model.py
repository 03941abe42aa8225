# tests/unit/contracts/test_report_model.py
"""Tests for findings and the consolidated report."""

import json

from flowguard.contracts import Severity, ValidationCode, ValidationIssue, ValidationReport, ValidationSummary


def _issue(code: ValidationCode, severity: Severity, **kwargs: object) -> ValidationIssue:
    return ValidationIssue(code=code, message=code.value, severity=severity, **kwargs)  # type: ignore[arg-type]


class TestValidationReport:
    """Tests for ValidationReport."""

    def test_valid_iff_no_errors(self) -> None:
        warning_only = ValidationReport(warnings=(_issue(ValidationCode.UNUSED_VARIABLE, Severity.WARNING),))
        with_error = ValidationReport(errors=(_issue(ValidationCode.NO_BLOCKS, Severity.ERROR),))

        assert warning_only.is_valid
        assert not with_error.is_valid

    def test_codes_lists_errors_before_warnings(self) -> None:
        report = ValidationReport(
            errors=(_issue(ValidationCode.SELF_CONNECTION, Severity.ERROR),),
            warnings=(_issue(ValidationCode.PORT_CONVERSION, Severity.WARNING),),
        )

        assert report.codes() == [ValidationCode.SELF_CONNECTION, ValidationCode.PORT_CONVERSION]

    def test_issues_for_block(self) -> None:
        report = ValidationReport(
            errors=(_issue(ValidationCode.ORPHANED_BLOCK, Severity.ERROR, block_id="a"),),
            warnings=(_issue(ValidationCode.DEPRECATED_BLOCK, Severity.WARNING, block_id="b"),),
        )

        assert [i.code for i in report.issues_for_block("b")] == [ValidationCode.DEPRECATED_BLOCK]

    def test_to_dict_is_json_serializable(self) -> None:
        report = ValidationReport(
            errors=(
                _issue(
                    ValidationCode.UNDEFINED_VARIABLE,
                    Severity.ERROR,
                    block_id="c",
                    context={"variable": "x", "available": ["a", "b"]},
                ),
            ),
            summary=ValidationSummary(total_blocks=3),
        )

        data = json.loads(json.dumps(report.to_dict()))

        assert data["is_valid"] is False
        assert data["errors"][0] == {
            "code": "UNDEFINED_VARIABLE",
            "message": "UNDEFINED_VARIABLE",
            "severity": "error",
            "block_id": "c",
            "context": {"variable": "x", "available": ["a", "b"]},
        }
        assert data["summary"]["total_blocks"] == 3

    def test_equal_reports_compare_equal(self) -> None:
        """Context mappings compare by value, so identical runs give equal reports."""
        a = ValidationReport(errors=(_issue(ValidationCode.NO_BLOCKS, Severity.ERROR, context={"k": 1}),))
        b = ValidationReport(errors=(_issue(ValidationCode.NO_BLOCKS, Severity.ERROR, context={"k": 1}),))

        assert a == b

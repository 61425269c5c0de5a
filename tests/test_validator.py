"""Tests for import payload validation."""

import copy
from decimal import Decimal

import pytest

from profitfirst.domain.validator import (
    ALLOCATION_TOLERANCE,
    Severity,
    build_report,
    validate_payload,
)


def _payload_with_allocations(total, amounts):
    return {
        "accounts": [{"id": "a1", "type": "PROFIT"}, {"id": "a2", "type": "OPEX"}],
        "transactions": [
            {
                "id": "t1",
                "date": "2024-03-15T00:00:00.000Z",
                "totalAmount": total,
                "allocations": [
                    {"accountId": "a1" if i % 2 == 0 else "a2", "amount": amount}
                    for i, amount in enumerate(amounts)
                ],
            }
        ],
    }


class TestStructure:
    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_non_object_payload(self, payload):
        findings = validate_payload(payload)
        assert len(findings) == 1
        assert findings[0].is_error
        assert "Invalid data format" in findings[0].message

    def test_missing_accounts(self):
        findings = validate_payload({"transactions": []})
        assert [f.message for f in findings] == ["Invalid data format: accounts array is required"]

    def test_transactions_not_a_list(self):
        findings = validate_payload({"accounts": [], "transactions": {"id": "t1"}})
        assert len(findings) == 1
        assert "transactions array is required" in findings[0].message

    def test_optional_collection_wrong_type(self):
        findings = validate_payload(
            {"accounts": [], "transactions": [], "profitDistributions": "nope"}
        )
        assert len(findings) == 1
        assert "profitDistributions must be an array" in findings[0].message

    def test_empty_payload_is_valid(self):
        assert validate_payload({"accounts": [], "transactions": []}) == []


class TestAccounts:
    def test_valid_sample(self, sample_payload):
        report = build_report(sample_payload)
        assert report.is_valid
        assert report.warnings == []

    def test_missing_id_and_type(self):
        findings = validate_payload({"accounts": [{"name": "x"}], "transactions": []})
        messages = [f.message for f in findings]
        assert "Account is missing an id" in messages
        assert "Account is missing a type" in messages

    def test_unknown_type(self):
        findings = validate_payload(
            {"accounts": [{"id": "a1", "type": "SAVINGS"}], "transactions": []}
        )
        assert findings[0].is_error
        assert "Unknown account type 'SAVINGS'" in findings[0].message

    def test_unhashable_type_is_reported_not_raised(self):
        findings = validate_payload(
            {"accounts": [{"id": "a1", "type": ["PROFIT"]}], "transactions": []}
        )
        assert findings[0].is_error

    @pytest.mark.parametrize("target", [-1, 100.5, "40", True])
    def test_bad_target_percentage(self, target):
        findings = validate_payload(
            {
                "accounts": [{"id": "a1", "type": "PROFIT", "targetPercentage": target}],
                "transactions": [],
            }
        )
        assert len(findings) == 1
        assert findings[0].is_error

    @pytest.mark.parametrize("target", [0, 100, Decimal("37.5")])
    def test_target_percentage_bounds_are_inclusive(self, target):
        findings = validate_payload(
            {
                "accounts": [{"id": "a1", "type": "PROFIT", "targetPercentage": target}],
                "transactions": [],
            }
        )
        assert findings == []

    @pytest.mark.parametrize("field", ["balance", "currentPercentage"])
    @pytest.mark.parametrize("value", ["1,000", "1000", [], {"amount": 1}])
    def test_non_numeric_account_amounts(self, sample_payload, field, value):
        sample_payload["accounts"][1][field] = value
        report = build_report(sample_payload)
        assert not report.is_valid
        assert report.errors[0].path == "accounts[1]"
        assert "is not a number" in report.errors[0].message

    def test_second_account_of_a_type_is_a_warning(self, sample_payload):
        sample_payload["accounts"].append({"id": "a-opex-2", "name": "Payroll", "type": "OPEX"})
        report = build_report(sample_payload)
        assert report.is_valid
        assert [f.path for f in report.warnings] == ["accounts[5]"]
        assert "More than one OPEX account" in report.warnings[0].message


class TestTransactions:
    def test_unknown_allocation_account_is_an_error(self, sample_payload):
        payload = copy.deepcopy(sample_payload)
        payload["transactions"][0]["allocations"][0]["accountId"] = "ghost"
        report = build_report(payload)

        assert not report.is_valid
        assert len(report.errors) == 1
        assert "ghost" in report.errors[0].message
        assert report.errors[0].path == "transactions[0].allocations[0]"

    def test_each_missing_field_is_its_own_error(self):
        findings = validate_payload({"accounts": [], "transactions": [{}]})
        messages = [f.message for f in findings]
        assert "Transaction is missing an id" in messages
        assert "Transaction is missing a date" in messages
        assert any("total amount" in m for m in messages)
        assert all(f.severity == Severity.ERROR for f in findings)

    def test_bad_date(self):
        findings = validate_payload(
            {
                "accounts": [],
                "transactions": [{"id": "t1", "date": "15/03/2024", "totalAmount": 10}],
            }
        )
        errors = [f for f in findings if f.is_error]
        assert len(errors) == 1
        assert "not ISO-8601" in errors[0].message

    def test_bool_is_not_a_number(self):
        findings = validate_payload(
            {
                "accounts": [],
                "transactions": [{"id": "t1", "date": "2024-03-15", "totalAmount": True}],
            }
        )
        assert len(findings) == 1
        assert findings[0].is_error

    def test_allocations_must_be_a_list(self):
        findings = validate_payload(
            {
                "accounts": [],
                "transactions": [
                    {"id": "t1", "date": "2024-03-15", "totalAmount": 10, "allocations": {}}
                ],
            }
        )
        assert [f.message for f in findings] == ["Allocations must be an array"]

    def test_non_numeric_allocation_amount(self):
        findings = validate_payload(_payload_with_allocations(100, ["lots"]))
        assert len(findings) == 1
        assert findings[0].is_error
        assert "not a number" in findings[0].message

    def test_duplicate_transaction_id_is_a_warning(self, sample_payload):
        payload = copy.deepcopy(sample_payload)
        payload["transactions"].append(copy.deepcopy(payload["transactions"][0]))
        report = build_report(payload)

        assert report.is_valid
        assert len(report.warnings) == 1
        assert "Duplicate transaction id" in report.warnings[0].message


class TestAllocationTolerance:
    def test_tolerance_constant(self):
        assert ALLOCATION_TOLERANCE == Decimal("0.1")

    def test_within_tolerance_has_no_warning(self):
        assert validate_payload(_payload_with_allocations(1000, [999.91])) == []

    def test_exactly_at_tolerance_has_no_warning(self):
        assert validate_payload(_payload_with_allocations(1000, [Decimal("999.9")])) == []

    def test_beyond_tolerance_warns_once_naming_both_values(self):
        findings = validate_payload(_payload_with_allocations(1000, [500, 499.80]))
        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING
        assert "999.8" in findings[0].message
        assert "1000" in findings[0].message

    def test_warning_does_not_block(self):
        report = build_report(_payload_with_allocations(1000, [900]))
        assert report.is_valid
        assert len(report.warnings) == 1


class TestDistributionsAndBankAccounts:
    def test_distribution_required_fields(self):
        findings = validate_payload(
            {"accounts": [], "transactions": [], "profitDistributions": [{"quarter": "Q1 2024"}]}
        )
        messages = [f.message for f in findings]
        assert "Profit distribution is missing an id" in messages
        assert any("date" in m for m in messages)
        assert any("amount" in m for m in messages)

    @pytest.mark.parametrize("field", ["totalProfit", "toOwners", "toCompany"])
    def test_non_numeric_distribution_amounts(self, sample_payload, field):
        sample_payload["profitDistributions"][0][field] = "abc"
        report = build_report(sample_payload)
        assert not report.is_valid
        assert report.errors[0].path == "profitDistributions[0]"
        assert "'abc' is not a number" in report.errors[0].message

    def test_bank_account_required_fields(self):
        findings = validate_payload(
            {"accounts": [], "transactions": [], "bankAccounts": [{"createdAt": "yesterday"}]}
        )
        messages = [f.message for f in findings]
        assert "Bank account is missing an id" in messages
        assert "Bank account is missing a bank name" in messages
        assert any("createdAt" in m for m in messages)


def test_validation_does_not_mutate(sample_payload):
    original = copy.deepcopy(sample_payload)
    validate_payload(sample_payload)
    assert sample_payload == original


def test_finding_str_includes_path():
    findings = validate_payload({"accounts": [{"id": "a1"}], "transactions": []})
    assert str(findings[0]) == "error: accounts[0]: Account is missing a type"

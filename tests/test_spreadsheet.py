"""Tests for the spreadsheet row parser."""

from decimal import Decimal

import pytest

from profitfirst.domain.entities import AccountType
from profitfirst.domain.spreadsheet import SpreadsheetParser, parse_spreadsheet, read_rows
from profitfirst.domain.validator import build_report


@pytest.fixture
def parser(sample_accounts):
    return SpreadsheetParser(sample_accounts, currency_symbol="BDT")


class TestRevenueRows:
    def test_revenue_row(self, parser):
        payload = parser.parse('15-Mar-24,"1,000",400,40%,200,20%,100,10%,300\n')

        assert len(payload["transactions"]) == 1
        txn = payload["transactions"][0]
        assert txn["date"] == "2024-03-15T00:00:00.000Z"
        assert txn["totalAmount"] == Decimal("1000")
        assert txn["description"] == "Mar 2024 Revenue"
        assert txn["id"] == "tx-2024-03-15T00:00:00.000Z-1000"
        assert txn["allocations"] == [
            {"accountId": "acc-profit", "amount": Decimal("400")},
            {"accountId": "acc-owners", "amount": Decimal("200")},
            {"accountId": "acc-tax", "amount": Decimal("100")},
            {"accountId": "acc-opex", "amount": Decimal("300")},
        ]

    def test_four_digit_year_and_lowercase_month(self, parser):
        payload = parser.parse("5-jan-2025,250,100,,50,,25,,75\n")
        assert payload["transactions"][0]["date"] == "2025-01-05T00:00:00.000Z"

    def test_unparseable_allocation_cells_are_zero(self, parser):
        payload = parser.parse("15-Mar-24,1000,n/a\n")
        amounts = [a["amount"] for a in payload["transactions"][0]["allocations"]]
        assert amounts == [Decimal("0")] * 4

    @pytest.mark.parametrize(
        "row",
        [
            "31-Feb-24,1000,400,,200,,100,,300",  # impossible day
            "15-Foo-24,1000,400,,200,,100,,300",  # unknown month
            "15-Mar-24,0,0,,0,,0,,0",  # zero revenue
            "15-Mar-24,abc,400,,200,,100,,300",  # unparseable revenue
        ],
    )
    def test_rows_that_produce_nothing(self, parser, row):
        assert parser.parse(row + "\n")["transactions"] == []

    def test_types_without_account_are_dropped(self, sample_accounts):
        accounts = [acc for acc in sample_accounts if acc.type != AccountType.TAX]
        payload = parse_spreadsheet("15-Mar-24,1000,400,,200,,100,,300\n", accounts)
        account_ids = [a["accountId"] for a in payload["transactions"][0]["allocations"]]
        assert account_ids == ["acc-profit", "acc-owners", "acc-opex"]


class TestDistributionRows:
    def test_distribution_marker(self, parser):
        payload = parser.parse("Q2 2025,,\nDistribution,500,\n")

        assert len(payload["profitDistributions"]) == 1
        dist = payload["profitDistributions"][0]
        assert dist["id"] == "dist-2025-q2"
        assert dist["quarter"] == "Q2 2025"
        assert dist["totalProfit"] == Decimal("1000")
        assert dist["distributionAmount"] == Decimal("500")
        assert dist["toOwners"] == Decimal("250")
        assert dist["toCompany"] == Decimal("250")
        assert dist["date"] == "2025-06-30T00:00:00.000Z"
        assert dist["isCompleted"] is True
        assert dist["notes"] == "Q2 2025 Distribution"

    def test_label_without_year_is_skipped(self, parser):
        assert parser.parse("Q3,,\nDistribution,500,\n")["profitDistributions"] == []

    def test_zero_amount_is_skipped(self, parser):
        assert parser.parse("Q3 2024,,\nDistribution,,\n")["profitDistributions"] == []

    def test_marker_on_first_row_is_skipped(self, parser):
        assert parser.parse("Distribution,500,\n")["profitDistributions"] == []


class TestWholeSheet:
    def test_fixture_sheet(self, parser, fixtures_dir):
        content = (fixtures_dir / "profit_first_2024.csv").read_text(encoding="utf-8")
        payload = parser.parse(content)

        descriptions = [t["description"] for t in payload["transactions"]]
        assert descriptions == [
            "Jan 2024 Revenue",
            "Feb 2024 Revenue",
            "Mar 2024 Revenue",
            "Apr 2024 Revenue",
        ]
        assert [d["id"] for d in payload["profitDistributions"]] == ["dist-2024-q1"]
        assert payload["bankAccounts"] == []
        assert payload["currencySymbol"] == "BDT"
        assert [a["id"] for a in payload["accounts"]] == [
            "acc-income",
            "acc-profit",
            "acc-owners",
            "acc-tax",
            "acc-opex",
        ]

    def test_parsed_sheet_validates(self, parser, fixtures_dir):
        content = (fixtures_dir / "profit_first_2024.csv").read_text(encoding="utf-8")
        report = build_report(parser.parse(content))
        assert report.is_valid
        assert report.warnings == []

    def test_parsing_is_deterministic(self, parser, fixtures_dir):
        content = (fixtures_dir / "profit_first_2024.csv").read_text(encoding="utf-8")
        assert parser.parse(content) == parser.parse(content)

    def test_semicolon_delimiter(self, parser):
        payload = parser.parse("15-Mar-24;1000;400;;200;;100;;300\n16-Mar-24;500;200;;100;;50;;150\n")
        assert [t["totalAmount"] for t in payload["transactions"]] == [
            Decimal("1000"),
            Decimal("500"),
        ]


def test_read_rows_drops_empty_rows():
    rows = read_rows("a,b\n,,\n\nc,d\n")
    assert rows == [["a", "b"], ["c", "d"]]

"""Unit tests for bank comparison, ranking and spending patterns"""

from dataclasses import replace

from finhub_gateway.domain.bank_comparison import (
    build_spending_patterns,
    calculate_performance_score,
    compare_banks,
    group_accounts_by_bank,
    rank_banks,
    summarize_accounts,
    top_category,
)
from finhub_gateway.domain.metrics import empty_metrics


def metrics_with(**fields):
    return replace(empty_metrics(), **fields)


def test_group_accounts_by_exact_bank_name(accounts):
    groups = group_accounts_by_bank(accounts)

    assert list(groups) == ["GTBank", "Access Bank"]
    assert [a.account_id for a in groups["GTBank"]] == ["acc_gt_1", "acc_gt_2"]


def test_top_category_tie_breaks_by_name():
    assert top_category({"transport": 500, "food": 500, "fees": 100}) == ("food", 500)
    assert top_category({}) is None


class TestCompareBanks:
    def test_sorted_by_spending(self, accounts):
        groups = group_accounts_by_bank(accounts)
        metrics = {
            "GTBank": metrics_with(total_spending=1000),
            "Access Bank": metrics_with(total_spending=5000),
        }

        comparison = compare_banks(groups, metrics)

        assert [b.bank_name for b in comparison.banks] == ["Access Bank", "GTBank"]
        assert comparison.summary.total_banks == 2
        assert comparison.summary.total_accounts == 3
        assert comparison.summary.most_active_bank == "Access Bank"
        assert comparison.summary.total_balance == 200000

    def test_equal_spending_orders_by_name(self, accounts):
        groups = group_accounts_by_bank(accounts)
        metrics = {"GTBank": empty_metrics(), "Access Bank": empty_metrics()}

        comparison = compare_banks(groups, metrics)

        assert [b.bank_name for b in comparison.banks] == ["Access Bank", "GTBank"]

    def test_no_accounts(self):
        comparison = compare_banks({}, {})

        assert comparison.banks == []
        assert comparison.summary.most_active_bank is None
        assert comparison.summary.total_balance == 0


def test_summarize_accounts_busiest_first(accounts):
    metrics = {
        "acc_gt_1": metrics_with(transaction_count=4),
        "acc_gt_2": metrics_with(transaction_count=9),
        "acc_access_1": metrics_with(transaction_count=4),
    }

    analytics = summarize_accounts(accounts, metrics)

    assert [a.account_id for a in analytics.accounts] == ["acc_gt_2", "acc_access_1", "acc_gt_1"]
    assert analytics.summary.most_active_account == "GT Current"
    assert analytics.summary.total_transactions == 17
    assert analytics.accounts[0].current_balance == 30000


class TestPerformanceScore:
    def test_components(self):
        metrics = metrics_with(savings_ratio=30, transaction_count=50, average_balance=1000, min_balance=500, late_fees=1)

        # 30 savings + 5 activity + 10 stability + 18 fees
        assert calculate_performance_score(metrics) == 63

    def test_caps(self):
        metrics = metrics_with(savings_ratio=95, transaction_count=900, average_balance=100, min_balance=100)

        assert calculate_performance_score(metrics) == 100

    def test_empty_metrics_only_score_fees(self):
        assert calculate_performance_score(empty_metrics()) == 20


def test_rank_banks(accounts):
    groups = group_accounts_by_bank(accounts)
    comparison = compare_banks(
        groups,
        {
            "GTBank": metrics_with(total_spending=9000, savings_ratio=40, late_fees=0),
            "Access Bank": metrics_with(total_spending=1000, savings_ratio=0, late_fees=10),
        },
    )

    ranking = rank_banks(comparison)

    assert [r.bank_name for r in ranking.rankings] == ["GTBank", "Access Bank"]
    assert ranking.rankings[0].performance_score == 60
    assert ranking.rankings[1].performance_score == 0
    assert ranking.rankings[1].fees == 10
    assert ranking.best_performing_bank == "GTBank"
    assert ranking.average_score == 30


def test_rank_banks_empty():
    ranking = rank_banks(compare_banks({}, {}))

    assert ranking.rankings == []
    assert ranking.best_performing_bank is None
    assert ranking.average_score == 0


def test_spending_patterns(accounts):
    groups = group_accounts_by_bank(accounts)
    comparison = compare_banks(
        groups,
        {
            "GTBank": metrics_with(total_spending=3000, spending_by_category={"food": 2000, "transport": 1000}),
            "Access Bank": metrics_with(total_spending=2500, spending_by_category={"transport": 2500}),
        },
    )

    report = build_spending_patterns(comparison)

    gt = report.patterns[0]
    assert gt.bank_name == "GTBank"
    assert gt.spending_percentages == {"food": 67, "transport": 33}
    assert gt.top_spending_category == "food"
    assert gt.top_spending_amount == 2000

    assert report.highest_spending_bank == "GTBank"
    assert report.highest_spending_amount == 3000
    # transport wins overall: 1000 + 2500
    assert report.top_category == "transport"
    assert report.top_category_amount == 3500


def test_spending_pattern_without_spending(accounts):
    groups = group_accounts_by_bank(accounts)
    comparison = compare_banks(groups, {"GTBank": empty_metrics(), "Access Bank": empty_metrics()})

    report = build_spending_patterns(comparison)

    assert report.patterns[0].top_spending_category == "none"
    assert report.patterns[0].spending_percentages == {}
    assert report.top_category is None

"""Tests for DuplicateDetector grouping and ranking."""

from datetime import date, timedelta
from unittest.mock import Mock

from ledger_dupes.config import DetectionSettings
from ledger_dupes.detection.clustering import TransitiveClustering
from ledger_dupes.detection.duplicate_detector import DuplicateDetector

BASE = date(2025, 6, 30)


class DescribeDuplicateDetector:
    class DescribeScanTransactions:
        def it_should_find_one_group_for_identical_transactions_fifteen_days_apart(self, make_txn):
            txns = [
                make_txn(id="a", description="Phone bill", event_date=BASE),
                make_txn(id="b", description="Phone bill", event_date=BASE - timedelta(days=15)),
            ]
            result = DuplicateDetector().scan_transactions(txns)

            assert len(result.duplicate_groups) == 1
            group = result.duplicate_groups[0]
            assert group.member_ids == ["a", "b"]
            assert group.confidence == 45
            assert group.days_apart == 15
            assert group.account_id == "acc-1"
            assert group.account_name == "Checking"

        def it_should_not_group_amounts_two_cents_apart(self, make_txn):
            txns = [make_txn(amount="150.00"), make_txn(amount="150.02")]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.is_empty

        def it_should_not_group_transactions_thirty_one_days_apart(self, make_txn):
            txns = [make_txn(event_date=BASE), make_txn(event_date=BASE - timedelta(days=31))]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.is_empty

        def it_should_never_group_across_accounts(self, make_txn):
            txns = [make_txn(account_id="acc-1"), make_txn(account_id="acc-2")]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.is_empty

        def it_should_report_scanned_count_with_no_groups(self, make_txn):
            txns = [make_txn(amount=f"{i}.00", event_date=BASE) for i in range(1, 501)]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.duplicate_groups == []
            assert result.scanned_transactions == 500
            assert result.total_duplicates_found == 0

        def it_should_count_all_but_one_member_per_group_as_duplicates(self, make_txn):
            txns = [
                make_txn(amount="10.00"),
                make_txn(amount="10.00"),
                make_txn(amount="10.00"),
                make_txn(amount="99.00"),
                make_txn(amount="99.00"),
            ]
            result = DuplicateDetector().scan_transactions(txns)

            assert len(result.duplicate_groups) == 2
            assert result.total_duplicates_found == 3

        def it_should_count_transactions_without_account_as_scanned_but_skip_them(self, make_txn):
            txns = [make_txn(account_id=None), make_txn(account_id=None)]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.is_empty
            assert result.scanned_transactions == 2

        def it_should_fall_back_to_default_account_name(self, make_txn):
            txns = [make_txn(account_name=None), make_txn(account_name=None)]
            result = DuplicateDetector().scan_transactions(txns)

            assert result.duplicate_groups[0].account_name == "Unknown account"

        def it_should_give_every_group_a_distinct_id(self, make_txn):
            txns = [make_txn(amount="1.00"), make_txn(amount="1.00"), make_txn(amount="2.00"), make_txn(amount="2.00")]
            result = DuplicateDetector().scan_transactions(txns)

            ids = [g.id for g in result.duplicate_groups]
            assert len(set(ids)) == 2

    class DescribeRanking:
        def it_should_sort_groups_by_confidence_descending(self, make_txn):
            txns = [
                # 20 days apart -> 40
                make_txn(id="low1", amount="1.00", event_date=BASE),
                make_txn(id="low2", amount="1.00", event_date=BASE - timedelta(days=20)),
                # same day -> 60
                make_txn(id="high1", amount="2.00", event_date=BASE),
                make_txn(id="high2", amount="2.00", event_date=BASE),
            ]
            result = DuplicateDetector().scan_transactions(txns)

            assert [g.member_ids[0] for g in result.duplicate_groups] == ["high1", "low1"]
            assert [g.confidence for g in result.duplicate_groups] == [60, 40]

        def it_should_keep_discovery_order_for_ties(self, make_txn):
            txns = [
                make_txn(id="a1", amount="1.00", account_id="acc-1"),
                make_txn(id="a2", amount="1.00", account_id="acc-1"),
                make_txn(id="b1", amount="1.00", account_id="acc-2"),
                make_txn(id="b2", amount="1.00", account_id="acc-2"),
                make_txn(id="c1", amount="5.00", account_id="acc-1"),
                make_txn(id="c2", amount="5.00", account_id="acc-1"),
            ]
            result = DuplicateDetector().scan_transactions(txns)

            assert [g.member_ids[0] for g in result.duplicate_groups] == ["a1", "c1", "b1"]

    class DescribeStrategy:
        def it_should_use_an_injected_strategy(self, make_txn):
            strategy = Mock()
            strategy.cluster.return_value = []
            txns = [make_txn(), make_txn()]

            DuplicateDetector(strategy=strategy).scan_transactions(txns)

            strategy.cluster.assert_called_once_with(txns)

        def it_should_build_the_strategy_from_settings(self):
            detector = DuplicateDetector(settings=DetectionSettings(clustering="transitive"))

            assert isinstance(detector.strategy, TransitiveClustering)

    class DescribePartitionByAccount:
        def it_should_keep_store_order_within_each_account(self, make_txn):
            txns = [
                make_txn(id="1", account_id="b"),
                make_txn(id="2", account_id="a"),
                make_txn(id="3", account_id="b"),
            ]
            by_account = DuplicateDetector.partition_by_account(txns)

            assert list(by_account) == ["b", "a"]
            assert [t.id for t in by_account["b"]] == ["1", "3"]

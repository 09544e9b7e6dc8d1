from datetime import date, timedelta
from decimal import Decimal

from ledger_dupes.config import DetectionSettings
from ledger_dupes.detection.clustering import (
    SeedClustering,
    TransitiveClustering,
    build_strategy,
    is_candidate_match,
)

BASE = date(2025, 3, 31)


def _ids(clusters):
    return [[t.id for t in c] for c in clusters]


class DescribeIsCandidateMatch:
    def it_should_accept_amounts_within_one_cent(self, make_txn):
        a = make_txn(amount="150.00")
        b = make_txn(amount="150.01")
        assert is_candidate_match(a, b)

    def it_should_reject_amounts_beyond_one_cent(self, make_txn):
        a = make_txn(amount="150.00")
        b = make_txn(amount="150.02")
        assert not is_candidate_match(a, b)

    def it_should_accept_dates_thirty_days_apart(self, make_txn):
        a = make_txn(event_date=BASE)
        b = make_txn(event_date=BASE - timedelta(days=30))
        assert is_candidate_match(a, b)

    def it_should_reject_dates_thirty_one_days_apart(self, make_txn):
        a = make_txn(event_date=BASE)
        b = make_txn(event_date=BASE - timedelta(days=31))
        assert not is_candidate_match(a, b)

    def it_should_honour_custom_thresholds(self, make_txn):
        a = make_txn(amount="10.00", event_date=BASE)
        b = make_txn(amount="10.50", event_date=BASE - timedelta(days=3))
        assert is_candidate_match(a, b, amount_tolerance=Decimal("0.50"), max_days_apart=3)
        assert not is_candidate_match(a, b, amount_tolerance=Decimal("0.50"), max_days_apart=2)


class DescribeSeedClustering:
    def it_should_group_matching_transactions_with_the_seed_first(self, make_txn):
        txns = [
            make_txn(id="t1", event_date=BASE),
            make_txn(id="t2", event_date=BASE - timedelta(days=5)),
            make_txn(id="t3", event_date=BASE - timedelta(days=10)),
        ]
        assert _ids(SeedClustering().cluster(txns)) == [["t1", "t2", "t3"]]

    def it_should_discard_singletons(self, make_txn):
        txns = [
            make_txn(id="t1", amount="10.00"),
            make_txn(id="t2", amount="20.00"),
        ]
        assert SeedClustering().cluster(txns) == []

    def it_should_compare_candidates_against_the_seed_only(self, make_txn):
        # U is 20 days from T, V is 15 days from U but 35 days from T
        txns = [
            make_txn(id="T", event_date=BASE),
            make_txn(id="U", event_date=BASE - timedelta(days=20)),
            make_txn(id="V", event_date=BASE - timedelta(days=35)),
        ]
        assert _ids(SeedClustering().cluster(txns)) == [["T", "U"]]

    def it_should_not_let_claimed_transactions_seed_again(self, make_txn):
        txns = [
            make_txn(id="T", event_date=BASE),
            make_txn(id="U", event_date=BASE - timedelta(days=20)),
            make_txn(id="V", event_date=BASE - timedelta(days=35)),
            make_txn(id="W", event_date=BASE - timedelta(days=40)),
        ]
        # U is claimed by T, so V seeds its own cluster with W
        assert _ids(SeedClustering().cluster(txns)) == [["T", "U"], ["V", "W"]]

    def it_should_move_past_seeds_without_matches(self, make_txn):
        txns = [
            make_txn(id="a", amount="5.00"),
            make_txn(id="b", amount="7.00"),
            make_txn(id="c", amount="7.00"),
        ]
        assert _ids(SeedClustering().cluster(txns)) == [["b", "c"]]


class DescribeTransitiveClustering:
    def it_should_join_chains_of_matches(self, make_txn):
        txns = [
            make_txn(id="T", event_date=BASE),
            make_txn(id="U", event_date=BASE - timedelta(days=20)),
            make_txn(id="V", event_date=BASE - timedelta(days=35)),
        ]
        assert _ids(TransitiveClustering().cluster(txns)) == [["T", "U", "V"]]

    def it_should_keep_unrelated_components_apart(self, make_txn):
        txns = [
            make_txn(id="a1", amount="10.00"),
            make_txn(id="b1", amount="99.00"),
            make_txn(id="a2", amount="10.00"),
            make_txn(id="b2", amount="99.00"),
            make_txn(id="c", amount="1.00"),
        ]
        assert _ids(TransitiveClustering().cluster(txns)) == [["a1", "a2"], ["b1", "b2"]]


class DescribeBuildStrategy:
    def it_should_default_to_seed_clustering(self):
        assert isinstance(build_strategy(DetectionSettings()), SeedClustering)

    def it_should_build_transitive_clustering_when_configured(self):
        strategy = build_strategy(DetectionSettings(clustering="transitive", max_days_apart=7))
        assert isinstance(strategy, TransitiveClustering)
        assert strategy.max_days_apart == 7

from ledger_dupes.detection.similarity import (
    description_similarity,
    levenshtein_distance,
    round_half_up,
)


class DescribeLevenshteinDistance:
    def it_should_be_zero_for_identical_strings(self):
        assert levenshtein_distance("SPOTIFY", "SPOTIFY") == 0

    def it_should_ignore_case(self):
        assert levenshtein_distance("Spotify Premium", "SPOTIFY PREMIUM") == 0

    def it_should_count_classic_edits(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("flaw", "lawn") == 2

    def it_should_equal_length_of_other_when_one_is_empty(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abcd", "") == 4

    def it_should_be_symmetric(self):
        pairs = [
            ("UBER *TRIP", "UBER TRIP HELP.UBER.COM"),
            ("PAYMENT TO MERCHANT", "Payment to Merchant Inc"),
            ("a", "xyz"),
        ]
        for a, b in pairs:
            assert levenshtein_distance(a, b) == levenshtein_distance(b, a)


class DescribeDescriptionSimilarity:
    def it_should_score_identical_descriptions_100(self):
        assert description_similarity("NETFLIX.COM", "NETFLIX.COM") == 100

    def it_should_score_two_empty_strings_100(self):
        assert description_similarity("", "") == 100

    def it_should_score_empty_against_text_0(self):
        assert description_similarity("", "RENT") == 0

    def it_should_normalize_by_longer_string(self):
        # one edit over the longer length
        assert description_similarity("RENT", "RENTS") == 80
        assert description_similarity("abcd", "abce") == 75

    def it_should_be_symmetric(self):
        a, b = "SPOTIFY PREMIUM", "SPOTIFY PREMIUM ON"
        assert description_similarity(a, b) == description_similarity(b, a)

    def it_should_stay_in_range_when_lower_casing_lengthens_text(self):
        # "İ".lower() is two code points
        assert description_similarity("İ", "") == 0
        assert 0 <= description_similarity("İİİ", "abc") <= 100

    def it_should_round_to_nearest_integer(self):
        # 1 - 1/3 = 66.67%
        assert description_similarity("abc", "abd") == 67


class DescribeRoundHalfUp:
    def it_should_round_halves_up(self):
        assert round_half_up(44.5) == 45
        assert round_half_up(2.5) == 3

    def it_should_round_other_values_to_nearest(self):
        assert round_half_up(44.49) == 44
        assert round_half_up(44.51) == 45

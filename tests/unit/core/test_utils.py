"""Tests for ordering, id, slug, datetime and validation helpers."""

import random
from datetime import datetime, timezone

import pytest

from core.utils.datetime import add_days, ensure_utc
from core.utils.ids import IdGenerator
from core.utils.ordering import array_move, is_dense
from core.utils.slug import slugify
from core.utils.validators import is_blank, validate_email


class TestArrayMove:
    """Remove-then-insert moves."""

    @pytest.mark.parametrize("from_index,to_index,expected", [
        (0, 2, ["b", "c", "a", "d"]),
        (3, 0, ["d", "a", "b", "c"]),
        (1, 1, ["a", "b", "c", "d"]),
        (1, 99, ["a", "c", "d", "b"]),
        (2, -5, ["c", "a", "b", "d"]),
    ])
    def test_moves(self, from_index, to_index, expected):
        assert array_move(["a", "b", "c", "d"], from_index, to_index) == expected

    def test_does_not_mutate_input(self):
        items = ["a", "b"]
        array_move(items, 0, 1)
        assert items == ["a", "b"]

    def test_bad_origin(self):
        with pytest.raises(IndexError):
            array_move(["a"], 1, 0)

    def test_matches_reference_for_all_pairs(self):
        items = list(range(6))
        for i in range(6):
            for j in range(6):
                expected = items[:i] + items[i + 1:]
                expected.insert(j, items[i])
                assert array_move(items, i, j) == expected


class TestIsDense:
    @pytest.mark.parametrize("orders,expected", [
        ([], True),
        ([2, 0, 1], True),
        ([0, 2], False),
        ([0, 0, 1], False),
        ([1, 2], False),
    ])
    def test_is_dense(self, orders, expected):
        assert is_dense(orders) is expected


class TestIdGenerator:
    def test_format_and_counter(self):
        ids = IdGenerator(rng=random.Random(1))
        first, second = ids.next("job"), ids.next("cand")
        assert first.startswith("job_") and first.endswith("1")
        assert second.startswith("cand_") and second.endswith("2")
        assert len(first) == len("job_") + 6 + 1

    def test_seeded_generators_agree(self):
        a = IdGenerator(rng=random.Random(7))
        b = IdGenerator(rng=random.Random(7))
        assert [a.next("x") for _ in range(5)] == [b.next("x") for _ in range(5)]

    def test_unique(self):
        ids = IdGenerator(rng=random.Random(0), suffix_length=1)
        generated = [ids.next("x") for _ in range(500)]
        assert len(set(generated)) == 500


class TestSlugify:
    @pytest.mark.parametrize("title,slug", [
        ("Senior Backend Engineer", "senior-backend-engineer"),
        ("  UI/UX   Designer!! ", "ui-ux-designer"),
        ("C++ Dev 2", "c-dev-2"),
        ("---", ""),
    ])
    def test_slugify(self, title, slug):
        assert slugify(title) == slug


class TestValidators:
    def test_email_is_normalized(self):
        assert validate_email("  Ava.Nguyen@Example.COM ") == (True, "ava.nguyen@example.com")

    def test_bad_email(self):
        valid, message = validate_email("not-an-email")
        assert valid is False
        assert message

    @pytest.mark.parametrize("value,expected", [(None, True), ("", True), ("  ", True), ("x", False)])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected


class TestDatetime:
    def test_naive_becomes_utc(self):
        assert ensure_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc

    def test_add_days(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert add_days(start, -1) == datetime(2023, 12, 31, tzinfo=timezone.utc)

"""Tests for the name inflection helpers."""

from __future__ import annotations

import pytest

from enum_fields.utils import pluralize, underscore


class TestUnderscore:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("User", "user"),
            ("UserNotification", "user_notification"),
            ("Admin::User", "admin/user"),
            ("admin.UserProfile", "admin/user_profile"),
            ("HTTPRequest", "http_request"),
            ("Model2Go", "model2_go"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_underscore(self, name: str, expected: str) -> None:
        assert underscore(name) == expected


class TestPluralize:
    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("status", "statuses"),
            ("record_type", "record_types"),
            ("category", "categories"),
            ("key", "keys"),
            ("box", "boxes"),
            ("match", "matches"),
            ("leaf", "leaves"),
            ("knife", "knives"),
            ("person", "people"),
            ("user_person", "user_people"),
            ("series", "series"),
            ("sample_column", "sample_columns"),
            ("", ""),
        ],
    )
    def test_pluralize(self, word: str, expected: str) -> None:
        assert pluralize(word) == expected

import pytest
from sqlalchemy import select

from vidshare.crud.crud_base import contains_pattern
from vidshare.models import Video
from vidshare.utils.pagination import Page, PageParams, clamp_limit, paginate


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 12), (0, 12), (-5, 1), (1, 1), (50, 50), (100, 100), (101, 100), (10_000, 100)],
)
def test_limit_is_clamped(raw, expected):
    assert clamp_limit(raw) == expected


@pytest.mark.parametrize("raw,expected", [(None, 1), (0, 1), (-3, 1), (4, 4)])
def test_page_is_floored(raw, expected):
    assert PageParams.from_query(raw, 10).page == expected


def test_offset():
    assert PageParams.from_query(3, 20).offset == 40


def test_has_next_page_iff_page_below_total_pages():
    assert Page(page=1, limit=10, total_items=25).has_next_page
    assert Page(page=2, limit=10, total_items=25).has_next_page
    assert not Page(page=3, limit=10, total_items=25).has_next_page
    assert not Page(page=1, limit=10, total_items=0).has_next_page


def test_meta_shape():
    meta = Page(page=2, limit=5, total_items=11).meta()
    assert meta == {
        "current_page": 2,
        "total_pages": 3,
        "total_items": 11,
        "items_per_page": 5,
        "has_next_page": True,
        "has_previous_page": True,
    }


def test_paginate_against_db(db, user, make_video):
    for i in range(7):
        make_video(user, title=f"v{i}")
    stmt = select(Video).order_by(Video.id.asc())

    page = paginate(db, stmt, PageParams.from_query(2, 3))

    assert [v.title for v in page.items] == ["v3", "v4", "v5"]
    assert page.total_items == 7
    assert page.total_pages == 3


def test_page_past_the_end_is_empty(db, user, make_video):
    make_video(user)
    page = paginate(db, select(Video), PageParams.from_query(5, 10))
    assert page.items == []
    assert page.total_items == 1
    assert not page.has_next_page


def test_huge_page_skips_the_row_query(db, user, make_video):
    make_video(user)
    page = paginate(db, select(Video), PageParams.from_query(10**19, 12))
    assert page.items == []
    assert page.total_items == 1
    assert page.has_previous_page


@pytest.mark.parametrize(
    "term,expected",
    [("cat", "%cat%"), ("50%", "%50\\%%"), ("a_b", "%a\\_b%"), ("c:\\x", "%c:\\\\x%")],
)
def test_contains_pattern_escapes_wildcards(term, expected):
    assert contains_pattern(term) == expected

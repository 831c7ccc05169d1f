import json
import random

import pytest
import responses
from responses import matchers

from groupfun.vtb import (
    FIRST_PROMPT,
    SECOND_PROMPT,
    THIRD_PROMPT,
    VTB_LIST_URL,
    VTB_PAGE_URL,
    FirstCategory,
    ThirdCategory,
    VtbDB,
    escape_record_url,
)

LIST = [
    {"name": "Alice", "description": "first", "icon_path": "a.png", "uid": "11"},
    {"name": "Bob", "description": "second", "icon_path": "b.png", "uid": "22"},
]

PAGE = {
    "data": {
        "voices": [
            {
                "categoryName": "Greetings",
                "author": "fan",
                "categoryDescription": {"zh-CN": "hello"},
                "voiceList": [
                    {"name": "Hi", "path": "voices/hi.mp3", "author": "fan",
                     "description": {"zh-CN": "hi clip"}},
                    {"name": "Bye", "path": "voices/bye.mp3", "author": "fan",
                     "description": {"zh-CN": "bye clip"}},
                ],
            },
            {"categoryName": "Songs", "voiceList": []},
        ]
    }
}


@pytest.fixture
def db(tmp_path):
    with VtbDB(tmp_path / "vtb.db") as store:
        yield store


def test_store_list_returns_uids_and_lists_vtubers(db):
    assert db.store_vtb_list(json.dumps(LIST)) == ["11", "22"]
    assert db.first_category_message() == FIRST_PROMPT + "0. Alice\n1. Bob\n"


def test_empty_first_message_is_prompt_only(db):
    assert db.first_category_message() == FIRST_PROMPT


def test_store_list_updates_instead_of_duplicating(db):
    db.store_vtb_list(LIST)
    db.store_vtb_list([dict(LIST[1], name="Bobby"), LIST[0]])
    lines = db.first_category_message().splitlines()
    assert len(lines) == 3
    assert db.first_category_by_uid("22") == FirstCategory(
        0, "Bobby", "22", "second", "b.png"
    )


def test_numeric_uid_is_text(db):
    assert db.store_vtb_list([{"name": "N", "uid": 123}]) == ["123"]
    assert db.first_category_by_uid("123").name == "N"


def test_store_list_rejects_non_array(db):
    with pytest.raises(ValueError):
        db.store_vtb_list('{"name": "x"}')


def test_page_categories_and_clips(db):
    db.store_vtb_list(LIST)
    db.store_vtb_page("11", json.dumps(PAGE))
    assert db.second_category_message(0) == SECOND_PROMPT + "0. Greetings\n1. Songs\n"
    assert db.third_category_message(0, 0) == THIRD_PROMPT + "0. Hi\n1. Bye\n"
    assert db.third_category_message(0, 1) == ""
    assert db.second_category_message(1) == ""


def test_third_category_lookup(db):
    db.store_vtb_list(LIST)
    db.store_vtb_page("11", PAGE)
    clip = db.third_category(0, 0, 1)
    assert clip == ThirdCategory(1, 0, "11", "Bye", "voices/bye.mp3", "fan", "bye clip")
    assert db.third_category(0, 0, 9) is None


def test_store_page_twice_keeps_one_copy(db):
    db.store_vtb_list(LIST)
    db.store_vtb_page("11", PAGE)
    changed = json.loads(json.dumps(PAGE))
    changed["data"]["voices"][0]["voiceList"][0]["name"] = "Hello"
    db.store_vtb_page("11", changed)
    assert db.third_category_message(0, 0).splitlines()[1:] == ["0. Hello", "1. Bye"]


def test_random_vtb(db):
    assert db.random_vtb(random.Random(1)) is None
    db.store_vtb_list(LIST)
    db.store_vtb_page("11", PAGE)
    names = {db.random_vtb(random.Random(seed)).name for seed in range(30)}
    assert names <= {"Hi", "Bye"}
    assert names


def test_first_category_by_uid_missing(db):
    assert db.first_category_by_uid("nope") is None


def test_escape_record_url():
    url = "https://example.com/voices/a b+c.mp3"
    assert escape_record_url(url) == "https://example.com/voices/a%20b%2Bc.mp3"


def test_escape_record_url_without_slash_is_unchanged():
    assert escape_record_url("plain.mp3") == "plain.mp3"


def test_escape_record_url_keeps_safe_name():
    url = "https://example.com/voices/hi.mp3"
    assert escape_record_url(url) == url


def test_fetch_vtb_list(db):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VTB_LIST_URL, json=LIST)
        assert db.fetch_vtb_list() == ["11", "22"]
        assert rsps.calls[0].request.headers["User-Agent"]


def test_fetch_vtb_page(db):
    db.store_vtb_list(LIST)
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            VTB_PAGE_URL,
            json=PAGE,
            match=[matchers.query_param_matcher({"uid": "11"})],
        )
        db.fetch_vtb_page("11")
    assert db.third_category(0, 0, 0).name == "Hi"
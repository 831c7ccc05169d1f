import sqlite3
from datetime import date

import pytest

from groupfun.marriage import (
    MarriageRecord,
    Registry,
    RegistryError,
    Status,
    check_married,
    check_mistress,
    check_single,
    slice_name,
)

GID = 123456


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "registry.db"


@pytest.fixture
def registry(db_path):
    reg = Registry(db_path)
    yield reg
    reg.close()


def _make_stale(db_path, gid):
    conn = sqlite3.connect(str(db_path))
    conn.execute("UPDATE updateinfo SET updatetime = ? WHERE gid = ?", ("2000/01/01", gid))
    conn.commit()
    conn.close()


def test_register_and_lookup(registry):
    registry.register(GID, 1, 2, "alice", "bob")
    record, status = registry.lookup(GID, 1)
    assert status is Status.HUSBAND
    assert (record.user, record.target, record.username, record.targetname) == (
        1,
        2,
        "alice",
        "bob",
    )
    record, status = registry.lookup(GID, 2)
    assert status is Status.WIFE
    assert record.user == 1


def test_lookup_unknown_is_single(registry):
    assert registry.lookup(GID, 42) == (None, Status.SINGLE)


def test_check_update_is_stable(registry):
    first = registry.check_update(GID)
    assert first == date.today().strftime("%Y/%m/%d")
    assert registry.check_update(GID) == first


def test_reset_group_clears_couples(registry):
    registry.register(GID, 1, 2, "a", "b")
    registry.reset(GID)
    assert registry.lookup(GID, 1)[1] is Status.SINGLE
    assert registry.roster(GID) == []


def test_reset_all_clears_every_group(registry):
    registry.register(GID, 1, 2, "a", "b")
    registry.register(GID + 1, 3, 4, "c", "d")
    registry.reset("ALL")
    assert registry.lookup(GID, 1)[1] is Status.SINGLE
    assert registry.lookup(GID + 1, 3)[1] is Status.SINGLE


def test_reset_invalid_group_raises(registry):
    with pytest.raises(RegistryError):
        registry.reset("not-a-group")


def test_divorce_removes_couple(registry):
    registry.register(GID, 1, 2, "a", "b")
    registry.divorce(GID, 2)
    assert registry.lookup(GID, 1)[1] is Status.SINGLE
    assert registry.lookup(GID, 2)[1] is Status.SINGLE


def test_remarry_inserts_when_user_single(registry):
    registry.lookup(GID, 1)
    registry.remarry(GID, 5, 6, "e", "f")
    record, status = registry.lookup(GID, 5)
    assert status is Status.HUSBAND
    assert record.target == 6


def test_remarry_noop_when_both_head_couples(registry):
    registry.register(GID, 1, 2, "a", "b")
    registry.register(GID, 3, 4, "c", "d")
    registry.remarry(GID, 1, 3, "a", "c")
    assert registry.lookup(GID, 1)[0].target == 2
    assert registry.lookup(GID, 3)[0].target == 4


def test_remarry_replaces_existing_couple(registry):
    registry.register(GID, 1, 2, "a", "b")
    registry.remarry(GID, 1, 9, "a", "z")
    record, _ = registry.lookup(GID, 1)
    assert record.target == 9
    assert record.targetname == "z"


def test_roster_excludes_singles_and_sorts(registry):
    registry.register(GID, 7, 8, "g", "h")
    registry.register(GID, 1, 2, "a", "b")
    registry.register(GID, 5, 0, "", "")
    roster = registry.roster(GID)
    assert [r.user for r in roster] == [1, 7]
    assert all(isinstance(r, MarriageRecord) and r.target != 0 for r in roster)


def test_stale_date_resets_on_check(registry, db_path):
    registry.register(GID, 1, 2, "a", "b")
    registry.check_update(GID)
    _make_stale(db_path, GID)
    assert check_single(registry, GID, 1, 3) is None
    assert registry.lookup(GID, 1)[1] is Status.SINGLE
    assert registry.check_update(GID) == date.today().strftime("%Y/%m/%d")


def test_check_single_messages(registry):
    registry.check_update(GID)
    assert check_single(registry, GID, 1, 2) is None
    registry.register(GID, 1, 2, "a", "b")
    assert check_single(registry, GID, 1, 2) == "笨蛋~你们明明已经在一起了啊w"
    assert check_single(registry, GID, 1, 3) == "笨蛋~你家里还有个吃白饭的w"
    assert check_single(registry, GID, 2, 3) == "该是0就是0，当0有什么不好"
    assert check_single(registry, GID, 3, 1) == "他有别的女人了，你该放下了"
    assert check_single(registry, GID, 3, 2) == "这是一个纯爱的世界，拒绝NTR"
    registry.register(GID, 4, 0, "", "")
    assert check_single(registry, GID, 4, 3) == "今天的你是单身贵族噢"
    assert check_single(registry, GID, 3, 4) == "今天的ta是单身贵族噢"


def test_check_mistress_messages(registry, db_path):
    registry.check_update(GID)
    registry.register(GID, 1, 2, "a", "b")
    assert check_mistress(registry, GID, 3, 1) is None
    assert check_mistress(registry, GID, 3, 3) is None
    assert check_mistress(registry, GID, 3, 4) == "ta现在还是单身哦，快向ta表白吧！"
    assert check_mistress(registry, GID, 1, 2) == "笨蛋~你们明明已经在一起了啊w"
    assert check_mistress(registry, GID, 1, 5) == "打灭，不给纳小妾！"
    assert check_mistress(registry, GID, 2, 5) == "该是0就是0，当0有什么不好"
    registry.register(GID, 6, 0, "", "")
    assert check_mistress(registry, GID, 6, 1) == "今天的你是单身贵族哦"
    assert check_mistress(registry, GID, 3, 6) == "今天的ta是单身贵族哦"
    _make_stale(db_path, GID)
    assert check_mistress(registry, GID, 3, 1) == "ta现在还是单身哦，快向ta表白吧！"


def test_check_married(registry):
    registry.check_update(GID)
    assert check_married(registry, GID, 1) == "今天你还没有结婚哦"
    registry.register(GID, 1, 2, "a", "b")
    assert check_married(registry, GID, 1) is None
    assert check_married(registry, GID, 2) is None


def test_slice_name_short_unchanged():
    assert slice_name("abc", lambda ch: 10.0) == "abc"


def test_slice_name_truncates_long():
    result = slice_name("abcdefghij", lambda ch: 50.0)
    assert result == "abcde......"
    assert result.endswith("......")
    assert "abcdefghij".startswith(result[: -len("......")])


def test_open_on_directory_raises(tmp_path):
    with pytest.raises(RegistryError):
        Registry(tmp_path)
"""Tests for the auxiliary compiler config map."""

from ccreg.config_map import SHARED_LIB_DEPS, CompilerConfigMap


class TestGet:
    def test_absent_key_is_empty(self) -> None:
        assert CompilerConfigMap().get("missing") == []

    def test_returns_copy(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a"])
        ccm.get("k").append("b")
        assert ccm.get("k") == ["a"]


class TestAdd:
    def test_accumulates_in_order(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a"])
        ccm.add("k", ["b"])
        assert ccm.get("k") == ["a", "b"]

    def test_keeps_duplicates(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a", "a"])
        ccm.add("k", ["a"])
        assert ccm.get("k") == ["a", "a", "a"]

    def test_accepts_any_iterable(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add(SHARED_LIB_DEPS, (lib for lib in ["libm.so", "libzdnn.so"]))
        assert ccm.get(SHARED_LIB_DEPS) == ["libm.so", "libzdnn.so"]


class TestDelete:
    def test_removes_value(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a"])
        ccm.add("k", ["b"])
        ccm.delete("k", ["a"])
        assert ccm.get("k") == ["b"]

    def test_removes_every_occurrence(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a", "b", "a", "c"])
        ccm.delete("k", ["a"])
        assert ccm.get("k") == ["b", "c"]

    def test_missing_value_is_noop(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a"])
        ccm.delete("k", ["zzz"])
        assert ccm.get("k") == ["a"]

    def test_missing_key_is_noop(self) -> None:
        ccm = CompilerConfigMap()
        ccm.delete("nope", ["a"])
        assert "nope" not in ccm

    def test_emptied_key_is_dropped(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("k", ["a", "b"])
        ccm.delete("k", ["a", "b"])
        assert ccm.get("k") == []
        assert "k" not in ccm
        assert len(ccm) == 0


class TestIteration:
    def test_keys_in_insertion_order(self) -> None:
        ccm = CompilerConfigMap()
        ccm.add("z", ["1"])
        ccm.add("a", ["2"])
        assert list(ccm) == ["z", "a"]
        assert ccm.as_dict() == {"z": ["1"], "a": ["2"]}

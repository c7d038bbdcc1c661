"""
Tests for TsEnvironment - the task sequence variable store.

Covers:
  - Safe construction outside the host
  - Key listing (best-effort, de-duplicated)
  - get / set round trips and error contract
  - Iteration, entries, snapshot_to_map
  - Context manager release
"""
import pytest

from models.errors import NativeInvocationFailure, NotAvailable
from models.schemas import VariableEntry
from native.memory_backend import EmulatedEnvironment, InMemoryBackend
from tasksequence.environment import TsEnvironment

ENV = "Microsoft.SMS.TSEnvironment"


# ──────────────────────────────────────────────────────────────
#  Availability
# ──────────────────────────────────────────────────────────────

class TestAvailability:

    def test_construct_without_host_never_raises(self, null_backend):
        env = TsEnvironment(ENV, null_backend)
        assert env.state == "unbound"

    def test_is_available_outside_host(self, offline_env):
        assert offline_env.is_available() is False

    def test_is_available_inside_host(self, env):
        assert env.is_available() is True
        assert env.state == "bound"

    def test_construct_with_unregistered_class(self, backend):
        env = TsEnvironment("Vendor.NotInstalled", backend)
        assert env.is_available() is False

    def test_defaults_come_from_settings(self, monkeypatch, tmp_path):
        config = tmp_path / "settings.yaml"
        config.write_text("native:\n  backend: memory\n")
        monkeypatch.setenv("TSBRIDGE_CONFIG", str(config))
        env = TsEnvironment()
        assert env.class_id == ENV
        assert env.is_available() is True


# ──────────────────────────────────────────────────────────────
#  Listing
# ──────────────────────────────────────────────────────────────

class TestListKeys:

    def test_lists_defined_variables(self, env):
        assert set(env.list_keys()) == {"OSDComputerName", "_SMSTSOrgName"}

    def test_unavailable_returns_empty(self, offline_env):
        assert offline_env.list_keys() == []

    def test_duplicates_and_non_strings_dropped(self, backend, env):
        backend.environment.GetVariables = lambda: ("A", "B", "A", 7, None, "B")
        assert env.list_keys() == ["A", "B"]

    def test_none_from_native_is_empty(self, backend, env):
        backend.environment.GetVariables = lambda: None
        assert env.list_keys() == []

    def test_listing_failure_propagates(self, backend, env):
        backend.environment.fail_next("GetVariables", RuntimeError("access denied"))
        with pytest.raises(NativeInvocationFailure):
            env.list_keys()

    def test_contains(self, env):
        assert "OSDComputerName" in env
        assert "Missing" not in env


# ──────────────────────────────────────────────────────────────
#  get / set
# ──────────────────────────────────────────────────────────────

class TestGetSet:

    def test_get_existing(self, env):
        assert env.get("OSDComputerName") == "PC01"
        assert env["_SMSTSOrgName"] == "Acme"

    @pytest.mark.parametrize("value", ["PC02", "", "Ünïcødé 東京", "line1\nline2"])
    def test_set_then_get_round_trip(self, env, value):
        env.set("OSDComputerName", value)
        assert env.get("OSDComputerName") == value

    def test_item_assignment(self, backend, env):
        env["SMSTSPreferredAdvertID"] = "ABC00001"
        assert backend.environment.variables["SMSTSPreferredAdvertID"] == "ABC00001"

    def test_unknown_key_reads_empty_by_default(self, env):
        assert env.get("NeverSet") == ""

    def test_unknown_key_failure_is_opaque(self, backend, env):
        backend.environment.strict_keys = True
        with pytest.raises(NativeInvocationFailure) as exc_info:
            env.get("NeverSet")
        assert isinstance(exc_info.value.native_error, KeyError)
        assert exc_info.value.member == "Value"

    def test_none_value_reads_as_empty(self, backend, env):
        backend.environment.variables["Blank"] = None
        assert env.get("Blank") == ""

    def test_get_unavailable(self, offline_env):
        with pytest.raises(NotAvailable):
            offline_env.get("OSDComputerName")

    def test_set_unavailable(self, offline_env):
        with pytest.raises(NotAvailable):
            offline_env.set("OSDComputerName", "PC01")

    def test_set_failure_propagates(self, backend, env):
        backend.environment.fail_next("Value", PermissionError("read-only variable"))
        with pytest.raises(NativeInvocationFailure):
            env.set("_SMSTSLogPath", "C:\\logs")

    def test_forwards_key_and_value(self, backend, env):
        env.set("Key", "Val")
        call = backend.environment.calls_to("Value")[-1]
        assert call.kind == "set"
        assert call.args == ("Key", "Val")

    @pytest.mark.parametrize("value", [None, 3, b"PC01"])
    def test_set_rejects_non_string(self, backend, env, value):
        with pytest.raises(TypeError, match="OSDComputerName"):
            env.set("OSDComputerName", value)
        assert backend.environment.calls_to("Value") == []
        assert "OSDComputerName" not in backend.environment.variables

    def test_set_non_string_unavailable(self, offline_env):
        with pytest.raises(NotAvailable):
            offline_env.set("OSDComputerName", None)


# ──────────────────────────────────────────────────────────────
#  Iteration and snapshots
# ──────────────────────────────────────────────────────────────

class TestIteration:

    def test_iterate_matches_listing_and_get(self, env):
        keys = env.list_keys()
        pairs = list(env.iterate())
        assert [k for k, _ in pairs] == keys
        for key, value in pairs:
            assert value == env.get(key)

    def test_iter_protocol(self, env):
        assert dict(env) == {"OSDComputerName": "PC01", "_SMSTSOrgName": "Acme"}

    def test_iterate_is_restartable(self, backend, env):
        first = dict(env.iterate())
        backend.environment.variables["Added"] = "later"
        second = dict(env.iterate())
        assert "Added" not in first
        assert second["Added"] == "later"

    def test_iterate_is_lazy(self, backend, env):
        env.is_available()
        before = len(backend.environment.calls)
        iterator = env.iterate()
        assert len(backend.environment.calls) == before
        next(iterator)
        assert len(backend.environment.calls) > before

    def test_entries(self, env):
        entries = list(env.entries())
        assert VariableEntry(key="OSDComputerName", value="PC01") in entries
        assert all(isinstance(e, VariableEntry) for e in entries)

    def test_snapshot_to_map(self, env):
        assert env.snapshot_to_map() == {"OSDComputerName": "PC01", "_SMSTSOrgName": "Acme"}

    def test_snapshot_is_independent_copy(self, backend, env):
        snapshot = env.snapshot_to_map()
        snapshot["OSDComputerName"] = "changed"
        assert backend.environment.variables["OSDComputerName"] == "PC01"

    def test_snapshot_unavailable_raises(self, offline_env):
        with pytest.raises(NotAvailable):
            offline_env.snapshot_to_map()

    def test_iterate_unavailable_raises(self, offline_env):
        with pytest.raises(NotAvailable):
            list(offline_env.iterate())

    def test_empty_store(self):
        env = TsEnvironment(ENV, InMemoryBackend())
        assert env.snapshot_to_map() == {}


# ──────────────────────────────────────────────────────────────
#  Lifecycle
# ──────────────────────────────────────────────────────────────

class TestLifecycle:

    def test_context_manager_releases(self, backend):
        with TsEnvironment(ENV, backend) as env:
            env["A"] = "1"
        assert env.state == "released"
        assert isinstance(backend.released[0], EmulatedEnvironment)
        with pytest.raises(NotAvailable):
            env.get("A")

    def test_release_on_exception(self, backend):
        with pytest.raises(RuntimeError):
            with TsEnvironment(ENV, backend) as env:
                env.is_available()
                raise RuntimeError("step failed")
        assert env.state == "released"
        assert len(backend.released) == 1

    def test_instances_do_not_share_handles(self, backend):
        a = TsEnvironment(ENV, backend)
        b = TsEnvironment(ENV, backend)
        a.is_available()
        b.is_available()
        a.release()
        assert b.is_available() is True
        assert backend.constructed[ENV] == 2

    def test_repr(self, env):
        assert "TsEnvironment" in repr(env)

"""Test ContextManager set/get/update/remove/reset/snapshot."""

from datetime import datetime, timezone

from opendatalayer.context.manager import ContextManager


class TestSetGet:
    def test_starts_empty(self, context_manager):
        assert context_manager.get() == {}
        assert len(context_manager) == 0

    def test_set_replaces_wholesale(self, context_manager):
        context_manager.set("user", {"id": "1", "plan": "pro"})
        context_manager.set("user", {"id": "2"})
        assert context_manager.get() == {"user": {"id": "2"}}

    def test_get_returns_live_reference(self, context_manager):
        live = context_manager.get()
        live["page"] = {"url": "/home"}
        assert context_manager.get()["page"] == {"url": "/home"}
        assert "page" in context_manager


class TestUpdate:
    def test_deep_merges_plain_dicts(self, context_manager):
        context_manager.set("user", {"id": "42", "traits": {"plan": "free", "age": 30}})
        context_manager.update("user", {"traits": {"plan": "pro"}})
        assert context_manager.get()["user"] == {
            "id": "42",
            "traits": {"plan": "pro", "age": 30},
        }

    def test_lists_are_replaced_not_concatenated(self, context_manager):
        context_manager.set("user", {"segments": ["a", "b"]})
        context_manager.update("user", {"segments": ["c"]})
        assert context_manager.get()["user"]["segments"] == ["c"]

    def test_missing_key_uses_partial(self, context_manager):
        partial = {"status": "granted"}
        context_manager.update("consent", partial)
        assert context_manager.get()["consent"] == {"status": "granted"}
        # Stored value is a copy of the partial
        partial["status"] = "denied"
        assert context_manager.get()["consent"]["status"] == "granted"

    def test_primitive_existing_is_replaced(self, context_manager):
        context_manager.set("flag", 3)
        context_manager.update("flag", {"on": True})
        assert context_manager.get()["flag"] == {"on": True}

    def test_list_existing_is_replaced(self, context_manager):
        context_manager.set("tags", ["x"])
        context_manager.update("tags", {"first": "y"})
        assert context_manager.get()["tags"] == {"first": "y"}

    def test_none_existing_is_replaced(self, context_manager):
        context_manager.set("session", None)
        context_manager.update("session", {"id": "s1"})
        assert context_manager.get()["session"] == {"id": "s1"}

    def test_class_instance_existing_is_replaced(self, context_manager):
        context_manager.set("when", datetime(2024, 1, 1, tzinfo=timezone.utc))
        context_manager.update("when", {"label": "new year"})
        assert context_manager.get()["when"] == {"label": "new year"}

    def test_non_dict_partial_replaces(self, context_manager):
        context_manager.set("user", {"id": "1"})
        context_manager.update("user", ["not", "a", "dict"])
        assert context_manager.get()["user"] == ["not", "a", "dict"]

    def test_update_does_not_mutate_previous_value(self, context_manager):
        original = {"traits": {"plan": "free"}}
        context_manager.set("user", original)
        context_manager.update("user", {"traits": {"plan": "pro"}})
        assert original == {"traits": {"plan": "free"}}


class TestRemoveReset:
    def test_remove_deletes_key(self, context_manager):
        context_manager.set("page", {"url": "/"})
        context_manager.remove("page")
        assert "page" not in context_manager.get()

    def test_remove_missing_is_noop(self, context_manager):
        context_manager.remove("nothing")  # Should not raise
        assert context_manager.get() == {}

    def test_reset_clears_everything(self, context_manager):
        context_manager.set("a", 1)
        context_manager.set("b", {"c": 2})
        context_manager.reset()
        assert context_manager.get() == {}


class TestSnapshot:
    def test_snapshot_equals_live_state(self, context_manager):
        context_manager.set("user", {"id": "42", "traits": {"tags": [1, 2]}})
        assert context_manager.snapshot() == context_manager.get()

    def test_mutating_live_state_does_not_touch_snapshot(self, context_manager):
        context_manager.set("user", {"id": "42", "traits": {"tags": [1, 2]}})
        snap = context_manager.snapshot()

        context_manager.get()["user"]["traits"]["tags"].append(3)
        context_manager.update("user", {"id": "99"})
        context_manager.set("page", {"url": "/"})

        assert snap == {"user": {"id": "42", "traits": {"tags": [1, 2]}}}

    def test_mutating_snapshot_does_not_touch_live_state(self):
        cm = ContextManager()
        cm.set("user", {"traits": {"plan": "free"}})
        snap = cm.snapshot()
        snap["user"]["traits"]["plan"] = "hacked"
        snap["extra"] = True
        assert cm.get() == {"user": {"traits": {"plan": "free"}}}

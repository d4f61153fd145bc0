"""
Tests for the in-memory game registry and memo cache.
"""

from ..registry import GameInfo, InMemoryGameRegistry
from ..rules import EssenceCondition, ManifestationTemplate
from ..utils.cache import MemoCache, content_hash, make_key


class TestInMemoryGameRegistry:
    """Tests for registration and lookup."""

    def test_register_game_registers_content(self, registry, realm_rules):
        assert registry.get_game("realm_quest").name == "Realm Quest"
        assert registry.get_interpretation_rules("realm_quest") == realm_rules
        assert [t.template_id for t in registry.get_templates("realm_quest", "dragon")] == ["dragon_lord"]

    def test_unknown_game(self):
        registry = InMemoryGameRegistry()
        assert registry.get_game("nope") is None
        assert registry.get_interpretation_rules("nope") is None
        assert registry.get_templates("nope", "dragon") == []

    def test_templates_filtered_by_archetype(self, registry):
        assert registry.get_templates("realm_quest", "sword") == []
        assert len(registry.get_templates("realm_quest", "DRAGON")) == 1

    def test_unrestricted_template_applies_to_all(self, registry):
        registry.register_template(ManifestationTemplate(
            game_id="realm_quest",
            template_id="generic",
            applies_to=[EssenceCondition(property="power_tier", operator=">", value=0)],
        ))
        assert [t.template_id for t in registry.get_templates("realm_quest", "sword")] == ["generic"]

    def test_reregistering_template_replaces_in_place(self, registry, dragon_template):
        replacement = dragon_template.model_copy(update={"priority": 9})
        registry.register_template(replacement)

        templates = registry.get_templates("realm_quest", "dragon")
        assert len(templates) == 1
        assert templates[0].priority == 9

    def test_list_games(self, registry):
        registry.register_game(GameInfo(game_id="space_fleet"))
        assert registry.list_games() == ["realm_quest", "space_fleet"]


class TestMemoCache:
    """Tests for the memo cache."""

    def test_get_put(self):
        cache = MemoCache("test")
        assert cache.get("k") is None
        cache.put("k", 1)
        assert cache.get("k") == 1

    def test_disabled(self):
        cache = MemoCache("test", enabled=False)
        cache.put("k", 1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_invalidate(self):
        cache = MemoCache("test")
        cache.put("a_1", 1)
        cache.put("a_2", 2)
        cache.put("b_1", 3)

        cache.invalidate("b_1")
        assert cache.list_cached() == ["a_1", "a_2"]

        cache.invalidate_prefix("a_")
        assert len(cache) == 0

    def test_access_count(self):
        cache = MemoCache("test")
        cache.put("k", 1)
        cache.get("k")
        cache.get("k")
        assert cache._entries["k"].access_count == 3

    def test_content_hash(self, dragon_essence):
        digest = content_hash(dragon_essence)
        assert len(digest) == 16
        assert digest == content_hash(dragon_essence.model_dump())

    def test_content_hash_ignores_computed_fields(self, dragon_essence):
        rescored = dragon_essence.model_copy(update={"essence_score": 1})
        assert content_hash(rescored) == content_hash(dragon_essence)

    def test_content_hash_changes_with_classification(self, dragon_essence):
        other = dragon_essence.model_copy(update={"element": "ice"})
        assert content_hash(other) != content_hash(dragon_essence)

    def test_make_key(self):
        assert make_key("realm_quest", "dragon") == "realm_quest_dragon"

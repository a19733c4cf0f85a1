"""Tests for the Battle orchestrator."""

from __future__ import annotations

import logging

import pytest

from battlecore.ir import (
    CharacterDefinition,
    Curve,
    DamageDefinition,
    Encounter,
    EncounterUnit,
    EnemyDefinition,
    ItemDefinition,
    ItemDrop,
    ProjectData,
    SkillDefinition,
    StatBlock,
    StatProgressions,
    StatusEffectDefinition,
)
from battlecore.sim.ai.random_ai import RandomAI, RandomEnemyAI
from battlecore.sim.config import BattleConfig
from battlecore.sim.core.actions import AttackAction
from battlecore.sim.core.battle import Battle
from battlecore.sim.core.rng import GameRNG
from battlecore.sim.core.status import BattleEntityType, PartyParameters


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _character(name: str, spd: int, hp: int = 50, atk: int = 10) -> CharacterDefinition:
    return CharacterDefinition(
        name=name,
        progressions=StatProgressions(mhp=Curve(base=hp), atk=Curve(base=atk), spd=Curve(base=spd)),
        attack_skill_id=0,
    )


def _make_project(
    characters: list[CharacterDefinition],
    enemies: list[EnemyDefinition],
    items: list[ItemDefinition] | None = None,
    status_effects: list[StatusEffectDefinition] | None = None,
) -> ProjectData:
    return ProjectData(
        characters=characters,
        enemies=enemies,
        skills=[SkillDefinition(name="Attack", damages=[DamageDefinition(atk_scale=1.0)])],
        items=items or [],
        status_effects=status_effects or [],
    )


def _make_battle(project: ProjectData, party_ids: list[int], enemy_idxs: list[int], **kwargs) -> Battle:
    params = PartyParameters.defaults_for(project)
    encounter = Encounter(name="test", units=[EncounterUnit(enemy_idx=i) for i in enemy_idxs])
    return Battle(project, party_ids, params, encounter, **kwargs)


def _drop_battle(chance: float) -> Battle:
    project = _make_project(
        [_character("Hero", spd=10)],
        [EnemyDefinition(
            name="Slime",
            base_stats=StatBlock(mhp=10, spd=5),
            dropped_items=[ItemDrop(item_id=0, chance=chance)],
        )],
        items=[ItemDefinition(name="Potion")],
    )
    return _make_battle(project, [0], [0], rng=GameRNG(3))


def _two_attacker_battle() -> Battle:
    """A (ready at once) and B (half ready) against an inert ogre."""
    project = _make_project(
        [_character("A", spd=20), _character("B", spd=15)],
        [EnemyDefinition(name="Ogre", base_stats=StatBlock(mhp=1000, spd=1))],
    )
    return _make_battle(project, [0, 1], [0])


def _assert_invariants(battle: Battle) -> None:
    for status in battle.all_status:
        assert 0.0 <= status.readiness <= 1.0
    queue = battle.ready_queue
    assert len({id(s) for s in queue}) == len(queue)
    assert not (battle.defeat and battle.victory)
    if battle.is_over:
        assert queue == []


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_invalid_party_id_rejected(self, duel_project, duel_encounter):
        params = PartyParameters.defaults_for(duel_project)
        with pytest.raises(ValueError, match="party character id 3"):
            Battle(duel_project, [3], params, duel_encounter)

    def test_invalid_enemy_index_rejected(self, duel_project):
        params = PartyParameters.defaults_for(duel_project)
        encounter = Encounter(units=[EncounterUnit(enemy_idx=7)])
        with pytest.raises(ValueError, match="enemy index 7"):
            Battle(duel_project, [0], params, encounter)

    def test_short_party_parameters_rejected(self, duel_project, duel_encounter):
        params = PartyParameters(
            character_levels=[],
            initial_character_hps=[],
            initial_character_mps=[],
            character_equip=[],
            initial_character_temp_status_effects=[],
            character_rows=[],
        )
        with pytest.raises(ValueError, match="no entry for character id 0"):
            Battle(duel_project, [0], params, duel_encounter)

    @pytest.mark.parametrize("item_id", [-1, 1])
    def test_unknown_equipment_rejected(self, item_id):
        project = _make_project(
            [_character("Hero", spd=10)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10))],
            items=[ItemDefinition(name="Sword", equippable=True, stat_bonuses=StatBlock(atk=5))],
        )
        params = PartyParameters.defaults_for(project)
        params.character_equip[0] = [item_id]
        with pytest.raises(ValueError, match=f"item id {item_id}"):
            Battle(project, [0], params, Encounter(units=[EncounterUnit(enemy_idx=0)]))

    @pytest.mark.parametrize("effect_id", [-1, 0])
    def test_unknown_status_effect_rejected(self, duel_project, duel_encounter, effect_id):
        params = PartyParameters.defaults_for(duel_project)
        params.initial_character_temp_status_effects[0] = [effect_id]
        with pytest.raises(ValueError, match=f"status effect id {effect_id}"):
            Battle(duel_project, [0], params, duel_encounter)

    def test_statuses_are_index_stable(self):
        project = _make_project(
            [_character("A", 10), _character("B", 12)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10, spd=5))],
        )
        battle = _make_battle(project, [1, 0], [0, 0])
        assert [s.index for s in battle.party_status] == [0, 1]
        assert [s.entity_id for s in battle.party_status] == [1, 0]
        assert [s.index for s in battle.enemy_status] == [0, 1]
        assert battle.all_status == battle.party_status + battle.enemy_status


class TestInitialReadiness:
    def test_linear_spread_by_speed(self):
        project = _make_project(
            [_character("Fast", spd=30), _character("Mid", spd=20)],
            [EnemyDefinition(name="Slow", base_stats=StatBlock(mhp=10, spd=10))],
        )
        battle = _make_battle(project, [0, 1], [0])
        fast, mid = battle.party_status
        slow = battle.enemy_status[0]
        assert (slow.readiness, mid.readiness, fast.readiness) == (0.0, 0.5, 1.0)
        assert battle.ready_queue == [fast]

    def test_lone_combatant_starts_ready(self):
        project = _make_project([_character("Hero", spd=10)], [])
        battle = _make_battle(project, [0], [])
        assert battle.party_status[0].readiness == 1.0
        # No enemies at all counts as an immediate win.
        assert battle.victory

    def test_equal_readiness_promoted_in_index_order(self):
        project = _make_project(
            [_character("A", spd=10), _character("B", spd=10)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10, spd=0))],
        )
        battle = _make_battle(project, [0, 1], [0])
        a, b = battle.party_status
        battle.advance_time(100.0)
        assert battle.ready_queue[:2] == [b, a]  # b started at 1.0, a promoted later
        assert battle.ready_entity is b


# ---------------------------------------------------------------------------
# Duel scenario
# ---------------------------------------------------------------------------

class TestDuel:
    def test_attack_kills_enemy_and_wins(self, duel_project, duel_encounter):
        battle = Battle(
            duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter,
        )
        hero = battle.party_status[0]
        slime = battle.enemy_status[0]

        assert hero.readiness == 1.0
        assert slime.readiness == 0.0
        battle.advance_time(0.0)
        assert battle.ready_entity is hero

        battle.submit_action(AttackAction(actor=hero, targets=[slime]))
        assert hero.readiness == 0.0
        assert battle.ready_queue == []

        for _ in range(100):
            if battle.victory:
                break
            battle.advance_time(0.1)
            _assert_invariants(battle)

        assert slime.hp == 0
        assert not slime.alive
        assert battle.victory
        assert not battle.defeat
        assert battle.ready_queue == []

        notification = battle.get_notification()
        assert notification is not None
        assert notification.action.actor is hero
        assert notification.hits[0].target is slime

    def test_rewards(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        assert battle.victory_experience == 5
        assert battle.gold_drops == 8

    def test_terminal_state_is_absorbing(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        hero = battle.party_status[0]
        battle.submit_action(AttackAction(actor=hero, targets=[battle.enemy_status[0]]))
        battle.advance_time(0.1)
        assert battle.victory

        time_before = battle.time
        readiness_before = hero.readiness
        for _ in range(10):
            battle.advance_time(1.0)

        assert battle.time == time_before
        assert hero.readiness == readiness_before
        assert battle.ready_queue == []
        assert battle.victory and not battle.defeat


# ---------------------------------------------------------------------------
# Action submission and notifications
# ---------------------------------------------------------------------------

class TestSubmission:
    def test_actor_not_ready_is_dropped(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        slime = battle.enemy_status[0]
        battle.submit_action(AttackAction(actor=slime, targets=[battle.party_status[0]]))
        assert battle.pending_actions == []

    def test_actor_cannot_act_twice(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        hero = battle.party_status[0]
        slime = battle.enemy_status[0]
        battle.submit_action(AttackAction(actor=hero, targets=[slime]))
        battle.submit_action(AttackAction(actor=hero, targets=[slime]))
        assert len(battle.pending_actions) == 1

    def test_pending_action_freezes_actor_readiness(self):
        battle = _two_attacker_battle()
        a, b = battle.party_status
        ogre = battle.enemy_status[0]
        # A's notification stays outstanding, so B's action stays queued.
        battle.submit_action(AttackAction(actor=a, targets=[ogre]))
        battle.advance_time(0.0)
        while b not in battle.ready_queue:
            battle.advance_time(0.1)
        battle.submit_action(AttackAction(actor=b, targets=[ogre]))

        battle.advance_time(1.0)
        assert b.readiness == 0.0

        battle.dismiss_notification()
        battle.advance_time(0.0)
        battle.advance_time(1.0)
        assert b.readiness > 0.0


class TestNotifications:

    def test_one_resolution_per_outstanding_notification(self):
        battle = _two_attacker_battle()
        a, b = battle.party_status
        ogre = battle.enemy_status[0]

        battle.submit_action(AttackAction(actor=a, targets=[ogre]))
        battle.advance_time(0.0)
        first = battle.get_notification()
        assert first is not None and first.action.actor is a

        while b not in battle.ready_queue:
            battle.advance_time(0.1)
        battle.submit_action(AttackAction(actor=b, targets=[ogre]))

        for _ in range(20):
            battle.advance_time(0.1)
            assert len(battle.pending_actions) == 1
            assert battle.get_notification() is first

        battle.dismiss_notification()
        battle.advance_time(0.1)
        assert battle.pending_actions == []
        second = battle.get_notification()
        assert second is not None and second.action.actor is b

    def test_dismiss_then_get_returns_none(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        hero = battle.party_status[0]
        battle.submit_action(AttackAction(actor=hero, targets=[battle.enemy_status[0]]))
        battle.advance_time(0.0)
        assert battle.get_notification() is not None

        battle.dismiss_notification()
        assert battle.get_notification() is None

    def test_action_of_dead_actor_announced_without_hits(self):
        battle = _two_attacker_battle()
        a, _ = battle.party_status
        ogre = battle.enemy_status[0]
        action = AttackAction(actor=a, targets=[ogre])
        battle.submit_action(action)
        a.hp = 0
        battle.advance_time(0.0)

        assert battle.pending_actions == []
        notification = battle.get_notification()
        assert notification is not None
        assert notification.action is action
        assert notification.hits == []
        assert ogre.hp == 1000


# ---------------------------------------------------------------------------
# Terminal conditions
# ---------------------------------------------------------------------------

class TestTerminalConditions:
    def test_party_wipe_is_defeat(self):
        project = _make_project(
            [_character("Hero", spd=5, hp=5)],
            [EnemyDefinition(name="Ogre", base_stats=StatBlock(mhp=100, atk=50, spd=50))],
        )
        battle = _make_battle(project, [0], [0], ai=RandomEnemyAI(rng=GameRNG(0), skill_chance=0.0))
        for _ in range(200):
            if battle.is_over:
                break
            battle.dismiss_notification()
            battle.advance_time(0.1)

        assert battle.defeat
        assert not battle.victory
        assert battle.ready_queue == []

    def test_simultaneous_wipe_reports_defeat(self, duel_project, duel_encounter):
        battle = Battle(duel_project, [0], PartyParameters.defaults_for(duel_project), duel_encounter)
        battle.party_status[0].hp = 0
        battle.enemy_status[0].hp = 0
        battle.advance_time(0.1)
        assert battle.defeat
        assert not battle.victory

    def test_dead_purged_from_ready_queue(self):
        project = _make_project(
            [_character("A", spd=10), _character("B", spd=10)],
            [EnemyDefinition(name="Ogre", base_stats=StatBlock(mhp=100, spd=0))],
        )
        battle = _make_battle(project, [0, 1], [0])
        a, b = battle.party_status
        battle.advance_time(100.0)
        assert a in battle.ready_queue

        a.hp = 0
        battle.advance_time(0.0)
        assert a not in battle.ready_queue
        assert b in battle.ready_queue


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_random_alive_of(self):
        project = _make_project(
            [_character("Hero", spd=10)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10, spd=5))],
        )
        battle = _make_battle(project, [0], [0, 0])
        first, second = battle.enemy_status
        first.hp = 0
        for _ in range(20):
            assert battle.random_alive_of(BattleEntityType.ENEMY) is second

        second.hp = 0
        assert battle.random_alive_of(BattleEntityType.ENEMY) is None

    def test_ready_enemies_filters_side(self):
        project = _make_project(
            [_character("Hero", spd=10)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10, spd=5))],
        )
        battle = _make_battle(project, [0], [0])
        battle.advance_time(100.0)
        assert battle.ready_enemies == [battle.enemy_status[0]]
        assert battle.ready_of(BattleEntityType.PARTY) == [battle.party_status[0]]

    def test_rewards_sum_over_roster(self):
        project = _make_project(
            [_character("Hero", spd=10)],
            [
                EnemyDefinition(name="Slime", exp_value=5, dropped_gold=8),
                EnemyDefinition(name="Goblin", exp_value=8, dropped_gold=15),
            ],
        )
        battle = _make_battle(project, [0], [0, 1, 1])
        assert battle.victory_experience == 21
        assert battle.gold_drops == 38

    def test_release_temp_status_effects(self):
        project = _make_project(
            [_character("Hero", spd=10)],
            [EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=10, spd=5))],
            status_effects=[
                StatusEffectDefinition(name="Weakened", stat_bonuses=StatBlock(atk=-3)),
                StatusEffectDefinition(name="Curse", release_on_battle_end=False),
            ],
        )
        params = PartyParameters.defaults_for(project)
        params.initial_character_temp_status_effects[0] = [0, 1]
        battle = Battle(project, [0], params, Encounter(units=[EncounterUnit(enemy_idx=0)]))
        hero = battle.party_status[0]
        assert hero.stats.atk == 7

        battle.release_temp_status_effects()

        assert hero.temp_status_effect_ids == [1]
        assert hero.stats.atk == 10


class TestItemDrops:
    def test_certain_drop_always_drops(self):
        battle = _drop_battle(1.0)
        for _ in range(10_000):
            assert battle.generate_item_drops() == [0]

    def test_zero_chance_never_drops(self):
        battle = _drop_battle(0.0)
        for _ in range(10_000):
            assert battle.generate_item_drops() == []

    def test_excess_chance_warns(self, caplog):
        project = _make_project(
            [_character("Hero", spd=10)],
            [EnemyDefinition(
                name="Mimic",
                base_stats=StatBlock(mhp=10),
                dropped_items=[ItemDrop(item_id=0, chance=0.8), ItemDrop(item_id=1, chance=0.7)],
            )],
            items=[ItemDefinition(name="Potion"), ItemDefinition(name="Candy")],
        )
        battle = _make_battle(project, [0], [0])
        with caplog.at_level(logging.WARNING, logger="battlecore.sim.core.battle"):
            drops = battle.generate_item_drops()

        assert len(drops) == 1
        assert drops[0] in (0, 1)
        assert "150.0%" in caplog.text


# ---------------------------------------------------------------------------
# Long-running invariants
# ---------------------------------------------------------------------------

class TestInvariants:
    @pytest.mark.parametrize("seed", range(5))
    def test_invariants_hold_over_random_battle(self, seed):
        project = _make_project(
            [_character("A", spd=10, hp=60), _character("B", spd=25, hp=40)],
            [
                EnemyDefinition(name="Slime", base_stats=StatBlock(mhp=30, atk=8, spd=5)),
                EnemyDefinition(name="Goblin", base_stats=StatBlock(mhp=40, atk=10, spd=15)),
            ],
        )
        rng = GameRNG(seed)
        battle = _make_battle(
            project, [0, 1], [0, 1, 1],
            ai=RandomEnemyAI(rng=rng.fork("enemy_ai")),
            rng=rng.fork("battle"),
            config=BattleConfig(base_turn_time=2.0),
        )
        party_ai = RandomAI(BattleEntityType.PARTY, rng=rng.fork("party_ai"))
        tick_rng = rng.fork("ticks")

        for _ in range(5000):
            if battle.is_over:
                break
            party_ai.update(battle)
            battle.advance_time(tick_rng.random_float() * 0.2)
            _assert_invariants(battle)
            if tick_rng.random_float() < 0.5:
                battle.dismiss_notification()

        assert battle.is_over
        _assert_invariants(battle)

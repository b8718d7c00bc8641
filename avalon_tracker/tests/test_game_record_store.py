"""Tests for the write and read operations of GameRecordStore."""

import logging

import pytest

from avalon_tracker.utils.exceptions import (
    AlreadyLinkedError,
    AlreadySetError,
    DuplicateAssignmentError,
    DuplicateKeyError,
    InvalidArgumentError,
    InvalidStatusError,
    ResourceNotFoundError,
)


def test_create_game_starts_without_winner(store):
    game = store.create_game("G1")

    assert game.id == "G1"
    assert game.winner is None
    assert store.get_game("G1") == game


def test_create_game_twice_fails_with_duplicate_key(store):
    store.create_game("G1")

    with pytest.raises(DuplicateKeyError) as exc_info:
        store.create_game("G1")

    assert exc_info.value.resource_id == "G1"
    assert store.list_game_ids() == ["G1"]


@pytest.mark.parametrize("game_id", ["", "   ", None])
def test_create_game_rejects_blank_id(store, game_id):
    with pytest.raises(InvalidArgumentError):
        store.create_game(game_id)


@pytest.mark.parametrize("player_name, role", [
    ("", "merlin"),
    ("   ", "merlin"),
    (None, "merlin"),
    ("Alice", ""),
    ("Alice", "  "),
    ("Alice", None),
])
def test_assign_role_rejects_blank_name_or_role(store, player_name, role):
    store.create_game("G1")

    with pytest.raises(InvalidArgumentError):
        store.assign_role("G1", player_name, role)

    assert store.list_roles_for_game("G1") == []


@pytest.mark.parametrize("winner", ["", "   ", None])
def test_set_winner_rejects_blank_winner(store, winner):
    store.create_game("G1")

    with pytest.raises(InvalidArgumentError):
        store.set_winner("G1", winner)

    assert store.get_game("G1").winner is None


@pytest.mark.parametrize("quest_id", ["", "   ", None])
def test_create_quest_rejects_blank_id(store, quest_id):
    with pytest.raises(InvalidArgumentError):
        store.create_quest(quest_id)


@pytest.mark.parametrize("player_name, role", [
    ("", "merlin"),
    (None, "merlin"),
    ("Alice", ""),
    ("Alice", None),
])
def test_add_quest_participant_rejects_blank_name_or_role(store, player_name, role):
    store.create_quest("Q1")

    with pytest.raises(InvalidArgumentError):
        store.add_quest_participant("Q1", player_name, role)

    assert store.list_participants_for_quest("Q1") == []


@pytest.mark.parametrize("fail_count", [True, False, 1.5, "2", None])
def test_record_quest_outcome_rejects_non_integer_fail_count(store, fail_count):
    store.create_quest("Q1")

    with pytest.raises(InvalidArgumentError):
        store.record_quest_outcome("Q1", fail_count, "failed")

    quest = store.get_quest("Q1")
    assert quest.fails == 0
    assert quest.status == "pending"


def test_get_game_unknown_id_fails(store):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        store.get_game("missing")

    assert exc_info.value.resource_type == "game"
    assert exc_info.value.error_code == "NOT_FOUND"


def test_set_winner_records_label(store):
    store.create_game("G1")

    game = store.set_winner("G1", "Evil")

    assert game.winner == "Evil"
    assert store.get_game("G1").winner == "Evil"


def test_set_winner_unknown_game_fails(store):
    with pytest.raises(ResourceNotFoundError):
        store.set_winner("nope", "good")


def test_set_winner_twice_does_not_rewrite_history(store):
    store.create_game("G1")
    store.set_winner("G1", "good")

    with pytest.raises(AlreadySetError):
        store.set_winner("G1", "evil")

    assert store.get_game("G1").winner == "good"


@pytest.mark.parametrize("first_role, second_role", [("merlin", "assassin"), ("servant", "servant")])
def test_assign_role_twice_fails_regardless_of_role(store, first_role, second_role):
    store.create_game("G1")
    store.assign_role("G1", "Alice", first_role)

    with pytest.raises(DuplicateAssignmentError):
        store.assign_role("G1", "Alice", second_role)

    roles = store.list_roles_for_game("G1")
    assert [(row.name, row.role) for row in roles] == [("Alice", first_role)]


def test_same_player_may_hold_roles_in_different_games(store):
    store.create_game("G1")
    store.create_game("G2")

    store.assign_role("G1", "Alice", "merlin")
    store.assign_role("G2", "Alice", "assassin")

    assert store.list_roles_for_game("G2")[0].role == "assassin"


def test_assign_role_unknown_game_fails(store):
    with pytest.raises(ResourceNotFoundError):
        store.assign_role("G404", "Alice", "merlin")

    assert store.list_roles_for_game("G404") == []


def test_create_quest_initializes_fail_count(store):
    quest = store.create_quest("Q1", "pending")

    assert quest.fails == 0
    assert quest.status == "pending"
    assert store.get_quest("Q1") == quest


def test_create_quest_twice_fails(store):
    store.create_quest("Q1")

    with pytest.raises(DuplicateKeyError):
        store.create_quest("Q1")


def test_create_quest_rejects_unknown_status(store):
    with pytest.raises(InvalidStatusError):
        store.create_quest("Q1", "in_progress")

    with pytest.raises(ResourceNotFoundError):
        store.get_quest("Q1")


def test_link_quest_requires_existing_game_and_quest(store):
    store.create_game("G1")
    store.create_quest("Q1")

    with pytest.raises(ResourceNotFoundError):
        store.link_quest_to_game("G2", "Q1")
    with pytest.raises(ResourceNotFoundError):
        store.link_quest_to_game("G1", "Q2")

    assert store.list_quests_for_game("G1") == []


def test_link_quest_twice_to_same_game_fails(store):
    store.create_game("G1")
    store.create_quest("Q1")
    store.link_quest_to_game("G1", "Q1")

    with pytest.raises(AlreadyLinkedError):
        store.link_quest_to_game("G1", "Q1")

    assert len(store.list_quests_for_game("G1")) == 1


def test_link_quest_to_second_game_fails(store):
    store.create_game("G1")
    store.create_game("G2")
    store.create_quest("Q1")
    store.link_quest_to_game("G1", "Q1")

    with pytest.raises(AlreadyLinkedError) as exc_info:
        store.link_quest_to_game("G2", "Q1")

    assert exc_info.value.details["game_id"] == "G1"
    assert store.list_quests_for_game("G2") == []


def test_record_quest_outcome_rejects_negative_fail_count(store):
    store.create_quest("Q1")

    with pytest.raises(InvalidArgumentError):
        store.record_quest_outcome("Q1", -1, "succeeded")


def test_record_quest_outcome_rejects_unknown_status(store):
    store.create_quest("Q1")

    with pytest.raises(InvalidStatusError):
        store.record_quest_outcome("Q1", 2, "unknown_status")

    assert store.get_quest("Q1").status == "pending"


def test_record_quest_outcome_unknown_quest_fails(store):
    with pytest.raises(ResourceNotFoundError):
        store.record_quest_outcome("Q404", 0, "succeeded")


def test_record_quest_outcome_accepts_short_spellings(store):
    store.create_quest("Q1")

    quest = store.record_quest_outcome("Q1", 0, "success")

    assert quest.status == "succeeded"


def test_resolved_quest_is_immutable(store):
    store.create_quest("Q1")
    store.record_quest_outcome("Q1", 2, "failed")

    with pytest.raises(AlreadySetError):
        store.record_quest_outcome("Q1", 0, "succeeded")

    quest = store.get_quest("Q1")
    assert (quest.fails, quest.status) == (2, "failed")


def test_pending_quest_can_be_updated_until_resolved(store):
    store.create_quest("Q1")
    store.record_quest_outcome("Q1", 1, "pending")

    quest = store.record_quest_outcome("Q1", 1, "failed")

    assert quest.fails == 1


def test_add_quest_participant_twice_fails(store):
    store.create_quest("Q1")
    store.add_quest_participant("Q1", "Alice", "leader")

    with pytest.raises(DuplicateAssignmentError):
        store.add_quest_participant("Q1", "Alice", "member")

    participants = store.list_participants_for_quest("Q1")
    assert [(row.name, row.role) for row in participants] == [("Alice", "leader")]


def test_add_quest_participant_unknown_quest_fails(store):
    with pytest.raises(ResourceNotFoundError):
        store.add_quest_participant("Q404", "Alice", "leader")


def test_reads_return_empty_lists_for_unknown_ids(store):
    assert store.list_roles_for_game("unknown") == []
    assert store.list_quests_for_game("unknown") == []
    assert store.list_participants_for_quest("unknown") == []


def test_full_game_scenario(store):
    store.create_game("G1")
    store.assign_role("G1", "Alice", "Merlin")
    store.assign_role("G1", "Bob", "Servant")
    store.create_quest("Q1", "pending")
    store.link_quest_to_game("G1", "Q1")
    store.add_quest_participant("Q1", "Alice", "leader")
    store.add_quest_participant("Q1", "Bob", "member")
    store.record_quest_outcome("Q1", 1, "failed")
    store.set_winner("G1", "Evil")

    roles = store.list_roles_for_game("G1")
    assert [(row.game_id, row.name, row.role) for row in roles] == [
        ("G1", "Alice", "Merlin"),
        ("G1", "Bob", "Servant"),
    ]

    quests = store.list_quests_for_game("G1")
    assert [(quest.id, quest.fails, quest.status) for quest in quests] == [("Q1", 1, "failed")]

    participants = store.list_participants_for_quest("Q1")
    assert [(row.name, row.role) for row in participants] == [("Alice", "leader"), ("Bob", "member")]

    assert store.get_game("G1").winner == "Evil"


def test_written_rows_read_back_unchanged(store):
    game = store.create_game("G1")
    role = store.assign_role("G1", "Carol", "percival")
    quest = store.create_quest("Q1", "pending")
    store.link_quest_to_game("G1", "Q1")
    participant = store.add_quest_participant("Q1", "Carol", "leader")

    assert store.get_game("G1") == game
    assert store.list_roles_for_game("G1") == [role]
    assert store.list_quests_for_game("G1") == [quest]
    assert store.list_participants_for_quest("Q1") == [participant]


def test_quests_are_listed_in_link_order(store):
    store.create_game("G1")
    for quest_id in ["Q3", "Q1", "Q2"]:
        store.create_quest(quest_id)
        store.link_quest_to_game("G1", quest_id)

    assert [quest.id for quest in store.list_quests_for_game("G1")] == ["Q3", "Q1", "Q2"]


def test_rejected_write_is_logged(store, caplog):
    store.create_game("G1")

    with caplog.at_level(logging.WARNING, logger="avalon_tracker"):
        with pytest.raises(DuplicateKeyError):
            store.create_game("G1")

    assert any(getattr(record, "error_code", None) == "DUPLICATE_KEY" for record in caplog.records)

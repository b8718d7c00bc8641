import pytest

from avalon_tracker.domain.logic.game_result import infer_victory_type
from avalon_tracker.domain.models.game import Alignment, QuestStatus, Role, VictoryType
from avalon_tracker.utils.exceptions import InvalidArgumentError, InvalidStatusError


@pytest.mark.parametrize("raw, expected", [
    ("merlin", Role.MERLIN),
    ("Merlin", Role.MERLIN),
    ("reverse_oberon", Role.REVERSE_OBERON),
    ("Reverse-Oberon", Role.REVERSE_OBERON),
    ("reverseoberon", Role.REVERSE_OBERON),
    (Role.SERVANT, Role.SERVANT),
])
def test_role_parse_is_lenient_about_spelling(raw, expected):
    assert Role.parse(raw) is expected


def test_role_parse_rejects_unknown_role():
    with pytest.raises(InvalidArgumentError):
        Role.parse("lancelot")


def test_role_alignments():
    evil = {role for role in Role if role.alignment is Alignment.EVIL}

    assert evil == {Role.ASSASSIN, Role.MORGANA, Role.MINION, Role.MORDRED, Role.OBERON}
    assert Role.REVERSE_OBERON.alignment is Alignment.GOOD


@pytest.mark.parametrize("raw, expected", [
    ("pending", QuestStatus.PENDING),
    ("succeeded", QuestStatus.SUCCEEDED),
    ("success", QuestStatus.SUCCEEDED),
    ("FAILED", QuestStatus.FAILED),
    ("fail", QuestStatus.FAILED),
])
def test_quest_status_parse(raw, expected):
    assert QuestStatus.parse(raw) is expected


@pytest.mark.parametrize("raw", ["unknown_status", "", None])
def test_quest_status_parse_rejects_values_outside_closed_set(raw):
    with pytest.raises(InvalidStatusError):
        QuestStatus.parse(raw)


def test_only_pending_is_unresolved():
    assert not QuestStatus.PENDING.is_resolved
    assert QuestStatus.SUCCEEDED.is_resolved
    assert QuestStatus.FAILED.is_resolved


def test_alignment_parse():
    assert Alignment.parse("Evil") is Alignment.EVIL
    with pytest.raises(InvalidArgumentError):
        Alignment.parse("neutral")


@pytest.mark.parametrize("winner, statuses, expected", [
    (Alignment.EVIL, [QuestStatus.FAILED, QuestStatus.FAILED], VictoryType.ASSASSINATION),
    (Alignment.EVIL, [QuestStatus.FAILED] * 3, VictoryType.QUEST),
    (Alignment.GOOD, [QuestStatus.SUCCEEDED] * 3, VictoryType.QUEST),
    (Alignment.GOOD, [], VictoryType.QUEST),
])
def test_infer_victory_type(winner, statuses, expected):
    assert infer_victory_type(winner, statuses) is expected

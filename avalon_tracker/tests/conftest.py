import pytest

from avalon_tracker.application.services.game_record_store import GameRecordStore
from avalon_tracker.infrastructure.database.session import Database


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'avalon.db'}"


@pytest.fixture
def database(database_url):
    db = Database(database_url)
    db.create_schema()
    yield db
    db.close()


@pytest.fixture
def store(database):
    return GameRecordStore(database)


GAMES_YAML = """
- players:
    player1: merlin
    player2: morgana
    player3: percival
    player4: servant
    player5: assassin
  quests:
    - status: success
      fails: 0
      participants:
        - player1
        - player2
    - status: fail
      fails: 1
      participants:
        - player1
        - player2
        - player4
    - status: fail
      fails: 2
      participants:
        - player2
        - player4
        - player5
    - status: success
      fails: 0
      participants:
        - player1
        - player3
        - player4
    - status: success
      fails: 0
      participants:
        - player1
        - player3
        - player4
  result:
    winner: evil
    type: assassination

- players:
    player1: merlin
    player2: morgana
    player3: percival
    player4: servant
    player5: reverse_oberon
    player6: assassin
  quests:
    - status: success
      fails: 0
      participants:
        - player1
        - player2
    - status: fail
      fails: 1
      participants:
        - player1
        - player2
        - player4
  result:
    winner: good
    type: quest
"""


@pytest.fixture
def games_yaml(tmp_path):
    path = tmp_path / "games.yaml"
    path.write_text(GAMES_YAML, encoding="utf-8")
    return path

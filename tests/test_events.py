"""Wire codec for inbound frames and outbound payloads."""
from __future__ import annotations

import pytest

from salvo.errors import ProtocolError
from salvo.events import (
    Fire,
    GameStart,
    JoinGame,
    PlayerReady,
    ResetGame,
    ShotResult,
    decode_inbound,
)
from salvo.models import Coord, FleetKind
from tests.helpers import frame, ships_payload, standard_board


def test_decode_join() -> None:
    assert decode_inbound(frame(type="joinGame", playerName="Alice")) == JoinGame(name="Alice")


def test_decode_shot() -> None:
    assert decode_inbound(frame(type="shot", row=3, col=7)) == Fire(coord=Coord(3, 7))


def test_decode_reset() -> None:
    assert isinstance(decode_inbound(frame(type="resetGame")), ResetGame)


def test_decode_ready_with_grid() -> None:
    event = decode_inbound(frame(type="playerReady", board=standard_board().to_rows()))
    assert isinstance(event, PlayerReady)
    assert event.board is not None
    assert event.board.to_rows() == standard_board().to_rows()


def test_decode_ready_with_ships() -> None:
    event = decode_inbound(frame(type="playerReady", ships=ships_payload()))
    assert isinstance(event, PlayerReady)
    assert event.board is None
    assert [s.kind for s in event.ships] == list(FleetKind)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        frame(type="dance"),
        frame(type=["shot"]),
        frame(playerName="Alice"),
        frame(type="joinGame"),
        frame(type="joinGame", playerName=7),
        frame(type="shot", row=1),
        frame(type="shot", row="1", col=1),
        frame(type="shot", row=True, col=1),
        frame(type="shot", row=10, col=0),
        frame(type="shot", row=0, col=-1),
        frame(type="playerReady"),
        frame(type="playerReady", board=[[None] * 10] * 3),
        frame(type="playerReady", board=[[None] * 10] * 9 + [[1] + [None] * 9]),
        frame(type="playerReady", board=[None] * 10),
        frame(type="playerReady", ships="carrier"),
        frame(type="playerReady", ships=[{"kind": "frigate", "row": 0, "col": 0, "orientation": "horizontal"}]),
        frame(type="playerReady", ships=[{"kind": "carrier", "row": 0, "col": 0, "orientation": "diagonal"}]),
        frame(type="playerReady", ships=[{"kind": "carrier", "row": "a", "col": 0, "orientation": "vertical"}]),
    ],
)
def test_malformed_frames_raise_protocol_error(raw: str) -> None:
    with pytest.raises(ProtocolError):
        decode_inbound(raw)


def test_outbound_payloads_use_client_field_names() -> None:
    assert GameStart(current_turn="p1").serialise() == {
        "type": "gameStart",
        "gameState": "playing",
        "currentTurn": "p1",
    }
    assert ShotResult(row=1, col=2, hit=True, ship_type=FleetKind.CRUISER).serialise() == {
        "type": "shotResult",
        "row": 1,
        "col": 2,
        "hit": True,
        "shipType": "cruiser",
    }
    assert ShotResult(row=1, col=2, hit=False).serialise()["shipType"] is None


def test_deeply_nested_frame_is_a_protocol_error() -> None:
    with pytest.raises(ProtocolError):
        decode_inbound("[" * 100000)

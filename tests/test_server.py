"""End-to-end checks over the HTTP and WebSocket surface."""
from __future__ import annotations

from fastapi.testclient import TestClient

from salvo.server import create_app
from tests.helpers import standard_board


def test_health_reports_counts() -> None:
    with TestClient(create_app()) as client:
        res = client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "healthy", "sessions": 0, "players": 0}


def test_index_without_client_is_404() -> None:
    with TestClient(create_app()) as client:
        assert client.get("/").status_code == 404


def test_malformed_frame_gets_error() -> None:
    with TestClient(create_app()) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("garbage")
            assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}


def test_two_players_start_a_game_and_disconnect_ends_it() -> None:
    board = standard_board().to_rows()
    with TestClient(create_app()) as client:
        with client.websocket_connect("/ws") as bob:
            with client.websocket_connect("/ws") as alice:
                alice.send_json({"type": "joinGame", "playerName": "Alice"})
                alice_id = alice.receive_json()["playerId"]
                assert alice.receive_json() == {"type": "playerJoined", "players": ["Alice"]}
                assert alice.receive_json()["type"] == "waiting"

                bob.send_json({"type": "joinGame", "playerName": "Bob"})
                bob_id = bob.receive_json()["playerId"]
                assert bob.receive_json() == {"type": "playerJoined", "players": ["Alice", "Bob"]}
                assert alice.receive_json() == {"type": "playerJoined", "players": ["Alice", "Bob"]}

                alice.send_json({"type": "playerReady", "board": board})
                bob.send_json({"type": "playerReady", "board": board})
                start = {"type": "gameStart", "gameState": "playing", "currentTurn": alice_id}
                assert alice.receive_json() == start
                assert bob.receive_json() == start

                assert client.get("/health").json() == {"status": "healthy", "sessions": 1, "players": 2}

                alice.send_json({"type": "shot", "row": 9, "col": 9})
                assert alice.receive_json() == {
                    "type": "shotResult",
                    "row": 9,
                    "col": 9,
                    "hit": False,
                    "shipType": None,
                }
                assert bob.receive_json() == {"type": "enemyShot", "row": 9, "col": 9, "hit": False}
                turn = {"type": "gameState", "gameState": "playing", "currentTurn": bob_id}
                assert alice.receive_json() == turn
                assert bob.receive_json() == turn

                alice.send_json({"type": "shot", "row": 0, "col": 0})
                assert alice.receive_json() == {"type": "error", "message": "It is not your turn."}

            assert bob.receive_json() == {
                "type": "playerDisconnected",
                "playerId": alice_id,
                "players": ["Bob"],
            }
            assert client.get("/health").json() == {"status": "healthy", "sessions": 0, "players": 0}


def test_binary_frames_are_decoded_and_keep_the_session_alive() -> None:
    with TestClient(create_app()) as client:
        with client.websocket_connect("/ws") as bob:
            with client.websocket_connect("/ws") as alice:
                alice.send_json({"type": "joinGame", "playerName": "Alice"})
                for _ in range(3):
                    alice.receive_json()
                bob.send_json({"type": "joinGame", "playerName": "Bob"})
                for _ in range(2):
                    bob.receive_json()
                assert alice.receive_json()["type"] == "playerJoined"

                alice.send_bytes(b'{"type":"shot","row":0,"col":0}')
                assert alice.receive_json() == {"type": "error", "message": "The game is not in progress."}
                alice.send_bytes(b"\xff\xfe")
                assert alice.receive_json() == {"type": "error", "message": "Invalid message format"}

                alice.send_bytes(b'{"type":"resetGame"}')
                assert alice.receive_json() == {"type": "resetComplete"}
                assert bob.receive_json() == {"type": "resetComplete"}
                assert client.get("/health").json() == {"status": "healthy", "sessions": 1, "players": 2}

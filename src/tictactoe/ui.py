"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .engine import GameEngine
from .game import EMPTY, Difficulty, Mode

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and the moves played in it."""

    engine: GameEngine
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    last_computer_move: Optional[Tuple[int, int]] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: Mode = Field(default=Mode.HUMAN_VS_HUMAN)
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Computer strength; ignored for human vs human",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    row: int = Field(ge=0, le=2)
    col: int = Field(ge=0, le=2)


class SettingsRequest(BaseModel):
    """Mode and/or difficulty change; applied now on a fresh board, else on reset."""

    model_config = ConfigDict(extra="forbid")

    mode: Optional[Mode] = None
    difficulty: Optional[Difficulty] = None

    @model_validator(mode="after")
    def ensure_something_to_change(self) -> "SettingsRequest":
        if self.mode is None and self.difficulty is None:
            raise ValueError("Provide a mode, a difficulty, or both")
        return self


def _create_session(mode: Mode, difficulty: Difficulty) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(engine=GameEngine(mode=mode, difficulty=difficulty))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (%s, %s)", session_id, mode.value, difficulty.value
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        engine = session.engine
        board = [
            [c if c != EMPTY else "" for c in row] for row in engine.board_snapshot()
        ]
        last = session.last_computer_move
        return {
            "id": game_id,
            "board": board,
            "currentTurn": engine.current_turn,
            "mode": engine.mode.value,
            "difficulty": engine.difficulty.value,
            "outcome": engine.outcome.value,
            "winner": engine.winner,
            "humanTurn": engine.human_turn,
            "moveLog": list(session.move_log),
            "lastComputerMove": (
                {"row": last[0], "col": last[1]} if last is not None else None
            ),
        }


def _apply_player_move(session: GameSession, row: int, col: int) -> None:
    with session.lock:
        engine = session.engine
        player = engine.current_turn
        reason = engine.illegal_move_reason(row, col)
        if reason is None and not engine.human_turn:
            reason = "Waiting for the computer"
        if reason is not None:
            raise HTTPException(status_code=400, detail=reason)

        # Two explicit steps so the computer's reply can be logged separately.
        engine.apply_human_move(row, col)
        session.move_log.append({"player": player, "row": row, "col": col})

        reply = engine.apply_computer_move_if_due()
        session.last_computer_move = reply
        if reply is not None:
            session.move_log.append(
                {"player": engine.computer_mark, "row": reply[0], "col": reply[1]}
            )


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(session, request.row, request.col)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.engine.reset()
        session.move_log.clear()
        session.last_computer_move = None
    return _serialize_session(game_id, session)


@app.put("/api/game/{game_id}/settings")
def update_settings(game_id: str, request: SettingsRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if request.mode is not None:
            session.engine.mode = request.mode
        if request.difficulty is not None:
            session.engine.difficulty = request.difficulty
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        --bg: #121212;
        --panel: #2d2d2d;
        --x: #2196f3;
        --o: #ff5722;
        --accent: #4caf50;
      }
      body {
        margin: 0;
        min-height: 100vh;
        background: linear-gradient(#1f1f1f, var(--bg));
        color: #fff;
        font-family: system-ui, sans-serif;
        display: flex;
        flex-direction: column;
        align-items: center;
      }
      h1 { margin: 2rem 0 0.5rem; }
      .hidden { display: none !important; }
      .panel { display: flex; flex-direction: column; gap: 0.75rem; width: min(90vw, 360px); }
      button {
        border: none;
        border-radius: 12px;
        padding: 0.9rem;
        font-size: 1rem;
        color: #fff;
        background: var(--panel);
        cursor: pointer;
      }
      button.primary { background: var(--accent); }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 6px;
        width: min(90vw, 360px);
        aspect-ratio: 1;
        background: rgba(255, 255, 255, 0.3);
        border-radius: 16px;
        overflow: hidden;
      }
      .cell {
        background: var(--panel);
        font-size: 3rem;
        font-weight: 700;
        border-radius: 0;
      }
      .cell.X { color: var(--x); }
      .cell.O { color: var(--o); }
      #status { margin: 1rem 0; font-weight: 600; }
      #result { font-size: 1.8rem; margin: 1rem 0; }
      .controls { display: flex; gap: 0.75rem; margin-top: 1rem; }
    </style>
  </head>
  <body>
    <h1>Tic-Tac-Toe</h1>

    <div id=\"mode-picker\" class=\"panel\">
      <button id=\"choose-pvp\">Human vs Human</button>
      <button id=\"choose-pvc\">Human vs Computer</button>
    </div>

    <div id=\"difficulty-picker\" class=\"panel hidden\">
      <p>Choose difficulty</p>
      <button data-difficulty=\"easy\">Easy</button>
      <button data-difficulty=\"medium\">Medium</button>
      <button data-difficulty=\"hard\">Hard</button>
      <button id=\"difficulty-back\">Back</button>
    </div>

    <div id=\"game-area\" class=\"hidden\">
      <div id=\"info\"></div>
      <div id=\"status\"></div>
      <div id=\"board\"></div>
      <div id=\"result\" class=\"hidden\"></div>
      <div class=\"controls\">
        <button id=\"restart\">Restart</button>
        <button id=\"menu\">Menu</button>
      </div>
    </div>

    <script>
      const modePicker = document.getElementById('mode-picker');
      const difficultyPicker = document.getElementById('difficulty-picker');
      const gameArea = document.getElementById('game-area');
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const infoEl = document.getElementById('info');
      const resultEl = document.getElementById('result');

      let gameId = null;
      let state = null;

      const RESULT_TEXT = { x_wins: 'X wins!', o_wins: 'O wins!', draw: 'Draw!' };

      async function api(path, method = 'GET', body = null) {
        const options = { method, headers: { 'Content-Type': 'application/json' } };
        if (body) options.body = JSON.stringify(body);
        const response = await fetch(path, options);
        if (!response.ok) return null;
        return response.json();
      }

      function show(panel) {
        for (const el of [modePicker, difficultyPicker, gameArea]) {
          el.classList.toggle('hidden', el !== panel);
        }
      }

      function render() {
        boardEl.innerHTML = '';
        if (!state) return;
        state.board.forEach((row, r) => {
          row.forEach((mark, c) => {
            const cell = document.createElement('button');
            cell.className = 'cell ' + mark;
            cell.textContent = mark;
            cell.disabled = !state.humanTurn || mark !== '';
            cell.addEventListener('click', () => play(r, c));
            boardEl.appendChild(cell);
          });
        });
        const vsComputer = state.mode === 'human_vs_computer';
        infoEl.textContent = vsComputer
          ? 'Human vs Computer (' + state.difficulty + ')'
          : 'Human vs Human';
        const finished = state.outcome !== 'ongoing';
        statusEl.textContent = finished ? '' : 'Turn: ' + state.currentTurn;
        resultEl.textContent = RESULT_TEXT[state.outcome] || '';
        resultEl.classList.toggle('hidden', !finished);
      }

      async function start(mode, difficulty = 'medium') {
        let next = null;
        if (gameId) {
          // Reuse the session: staged settings take effect on reset.
          const updated = await api('/api/game/' + gameId + '/settings', 'PUT', { mode, difficulty });
          if (updated) next = await api('/api/game/' + gameId + '/reset', 'POST');
        }
        if (!next) next = await api('/api/game', 'POST', { mode, difficulty });
        if (!next) return;
        state = next;
        gameId = state.id;
        show(gameArea);
        render();
      }

      async function play(row, col) {
        const next = await api('/api/game/' + gameId + '/move', 'POST', { row, col });
        if (next) {
          state = next;
          render();
        }
      }

      document.getElementById('choose-pvp').addEventListener('click', () => start('human_vs_human'));
      document.getElementById('choose-pvc').addEventListener('click', () => show(difficultyPicker));
      document.getElementById('difficulty-back').addEventListener('click', () => show(modePicker));
      for (const button of difficultyPicker.querySelectorAll('[data-difficulty]')) {
        button.addEventListener('click', () => start('human_vs_computer', button.dataset.difficulty));
      }
      document.getElementById('restart').addEventListener('click', async () => {
        state = await api('/api/game/' + gameId + '/reset', 'POST');
        render();
      });
      document.getElementById('menu').addEventListener('click', () => {
        state = null;
        render();
        show(modePicker);
      });
    </script>
  </body>
</html>
"""

"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import Difficulty
from .game import EMPTY
from .session import GameSession

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic Tac Toe", description="Play X against the computer")

# Seconds the computer "thinks" before replying; must stay non-zero in play.
COMPUTER_MOVE_DELAY = float(os.environ.get("TICTACTOE_COMPUTER_DELAY", "0.5"))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    difficulty: Difficulty = Field(
        default=Difficulty.EASY,
        description="'easy' plays random moves, 'hard' plays perfect minimax",
    )


class DifficultyRequest(BaseModel):
    """Request payload for switching difficulty (resets the board)."""

    difficulty: Difficulty


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(ge=0, le=8, description="Row-major cell index")


def _log_transition(session: GameSession) -> None:
    logger.debug(
        "Board %s, %s to move, %s",
        "".join(c if c != EMPTY else "." for c in session.board.cells),
        session.whose_turn,
        session.current_outcome.status,
    )


def _create_session(difficulty: Difficulty) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(difficulty=difficulty)
    session.subscribe(_log_transition)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (%s)", session_id, difficulty.value)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_computer_turn(game_id: str, token: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, COMPUTER_MOVE_DELAY))
    session.play_computer_move(token)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        outcome = session.current_outcome
        board: List[str] = [c if c in ("X", "O") else "" for c in session.board.cells]
        state: Dict[str, object] = {
            "id": game_id,
            "board": board,
            "currentPlayer": session.whose_turn,
            "difficulty": session.difficulty.value,
            "outcome": outcome.status,
            "winner": outcome.winner,
            "winningLine": list(outcome.line) if outcome.line else [],
            "status": session.status,
            "moveLog": list(session.move_log),
            "lastMove": session.last_move,
            "computerPending": session.computer_pending,
        }
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> bool:
    accepted = session.apply_human_move(index)
    token = session.pending_token
    if accepted and token is not None and background_tasks is not None:
        background_tasks.add_task(_run_computer_turn, game_id, token)
    return accepted


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    accepted = _apply_player_move(game_id, session, request.index, background_tasks)
    state = _serialize_session(game_id, session)
    state["accepted"] = accepted
    return state


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.reset()
    return _serialize_session(game_id, session)


@app.put("/api/game/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    session.set_difficulty(request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <link rel=\"preconnect\" href=\"https://fonts.googleapis.com\" />
    <link rel=\"preconnect\" href=\"https://fonts.gstatic.com\" crossorigin />
    <link
      href=\"https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700&display=swap\"
      rel=\"stylesheet\"
    />
    <style>
      :root {
        color-scheme: light;
        font-family: 'Poppins', system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        align-items: center;
        justify-content: center;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem 2.5rem;
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      #status {
        font-size: 1.25rem;
        font-weight: 500;
        margin-bottom: 1rem;
      }
      .controls {
        margin-bottom: 1.25rem;
      }
      button,
      select {
        font-size: 1rem;
        padding: 0.5rem 0.95rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 5rem);
        gap: 0.5rem;
        justify-content: center;
        margin-bottom: 1.5rem;
        transition: transform 0.3s ease, opacity 0.3s ease;
      }
      .board.resetting {
        transform: scale(0.9);
        opacity: 0.5;
      }
      .cell {
        width: 5rem;
        height: 5rem;
        border-radius: 12px;
        font-size: 2rem;
        font-weight: 700;
      }
      .cell:disabled {
        cursor: default;
      }
      .cell.win {
        border: 2px solid #22c55e;
        background: #dcfce7;
      }
      .cell.last {
        box-shadow: 0 0 0 3px #60a5fa;
      }
      #reset {
        background: #2563eb;
        color: white;
        font-weight: 600;
        border: none;
        padding: 0.6rem 1.5rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div id=\"status\">Setting up your game…</div>
      <div class=\"controls\">
        <label for=\"difficulty\">Difficulty:</label>
        <select id=\"difficulty\">
          <option value=\"easy\">Easy</option>
          <option value=\"hard\">Hard</option>
        </select>
      </div>
      <div id=\"board\" class=\"board\"></div>
      <button id=\"reset\" type=\"button\">Reset Game</button>
    </main>
    <script>
      const statusEl = document.getElementById('status');
      const boardEl = document.getElementById('board');
      const difficultyEl = document.getElementById('difficulty');
      const resetButton = document.getElementById('reset');
      let gameId = null;
      let gameState = null;
      let pollHandle = null;

      function render() {
        boardEl.innerHTML = '';
        const cells = gameState ? gameState.board : Array(9).fill('');
        cells.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.type = 'button';
          cell.className = 'cell';
          cell.textContent = value;
          cell.setAttribute('aria-label', `Square ${index + 1}`);
          if (gameState && gameState.winningLine.includes(index)) {
            cell.classList.add('win');
          }
          if (gameState && gameState.lastMove === index) {
            cell.classList.add('last');
          }
          cell.disabled =
            !gameState ||
            Boolean(value) ||
            gameState.outcome !== 'ongoing' ||
            gameState.currentPlayer !== 'X';
          cell.addEventListener('click', () => sendMove(index));
          boardEl.appendChild(cell);
        });
        statusEl.textContent = gameState ? gameState.status : 'Setting up your game…';
      }

      function setState(data) {
        gameState = data;
        gameId = data.id;
        difficultyEl.value = data.difficulty;
        render();
        if (data.computerPending) {
          ensurePolling();
        }
      }

      function stopPolling() {
        if (pollHandle !== null) {
          clearTimeout(pollHandle);
          pollHandle = null;
        }
      }

      function ensurePolling() {
        if (pollHandle !== null) return;
        pollHandle = window.setTimeout(poll, 250);
      }

      async function poll() {
        pollHandle = null;
        if (!gameId) return;
        try {
          const response = await fetch(`/api/game/${gameId}`);
          if (response.ok) {
            setState(await response.json());
          }
        } catch (error) {
          console.error('Polling failed', error);
        }
      }

      async function request(url, method, body) {
        const response = await fetch(url, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!response.ok) {
          throw new Error('Request failed');
        }
        return response.json();
      }

      async function startGame() {
        stopPolling();
        setState(await request('/api/game', 'POST', { difficulty: difficultyEl.value }));
      }

      async function sendMove(index) {
        if (!gameId) return;
        setState(await request(`/api/game/${gameId}/move`, 'POST', { index }));
      }

      async function withResetAnimation(action) {
        stopPolling();
        boardEl.classList.add('resetting');
        try {
          setState(await action());
        } finally {
          window.setTimeout(() => boardEl.classList.remove('resetting'), 350);
        }
      }

      resetButton.addEventListener('click', () =>
        withResetAnimation(() => request(`/api/game/${gameId}/reset`, 'POST'))
      );
      difficultyEl.addEventListener('change', () =>
        withResetAnimation(() =>
          request(`/api/game/${gameId}/difficulty`, 'PUT', { difficulty: difficultyEl.value })
        )
      );

      render();
      startGame().catch(() => {
        statusEl.textContent = 'Network error. Please reload the page.';
      });
    </script>
  </body>
</html>
"""

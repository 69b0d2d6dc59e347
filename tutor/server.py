from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

import websockets

from engine.game import HUMAN_SEAT, GameEngine
from engine.guidance import guidance_for, tutorial_tip
from engine.models import ActionType, Difficulty, TableConfig

LOGGER = logging.getLogger("tutor_host")

# The tutorial host gives every connection its own private table: one remote
# human against the house bot. All poker rules stay in GameEngine; this module
# only translates JSON messages and paces the bot in automatic mode.


class TutorServerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def _config_payload(config: TableConfig) -> Dict[str, Any]:
    return {
        "starting_stack": config.starting_stack,
        "sb": config.sb,
        "bb": config.bb,
        "human_name": config.human_name,
        "bot_name": config.bot_name,
        "difficulty": config.difficulty.value,
        "guided_mode": config.guided_mode,
        "bot_delay_ms": config.bot_delay_ms,
    }


async def _send_error(websocket: websockets.WebSocketServerProtocol, code: str, msg: str) -> None:
    await websocket.send(json.dumps({"v": 1, "type": "error", "code": code, "msg": msg}))


@dataclass
class TutorClient:
    name: str
    websocket: websockets.WebSocketServerProtocol

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.websocket.send(json.dumps({"v": 1, **payload}))


def _parse_action(message: Dict[str, Any]) -> Tuple[ActionType, int]:
    raw_action = message.get("action")
    try:
        action = ActionType(str(raw_action).upper())
    except ValueError:
        raise TutorServerError("BAD_ACTION", f"Unknown action: {raw_action}") from None

    raw_amount = message.get("amount", 0)
    if raw_amount is None:
        raw_amount = 0
    if isinstance(raw_amount, bool) or not isinstance(raw_amount, int) or raw_amount < 0:
        raise TutorServerError("BAD_ACTION", "amount must be a non-negative integer")
    return action, raw_amount


class TutorialSession:
    """Drives one engine on behalf of one connected player."""

    def __init__(self, config: TableConfig, client: TutorClient, seed: Optional[int] = None) -> None:
        self.config = config
        self.client = client
        self.engine = GameEngine(config, seed=seed)

    async def run(self) -> None:
        await self.client.send_json(
            {"type": "welcome", "seat": HUMAN_SEAT, "config": _config_payload(self.config), "state": self._state()}
        )
        async for raw in self.client.websocket:
            await self.handle_raw(raw)

    async def handle_raw(self, raw: Any) -> None:
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            await _send_error(self.client.websocket, "BAD_JSON", "Message must be a JSON object")
            return
        if not isinstance(message, dict):
            await _send_error(self.client.websocket, "BAD_JSON", "Message must be a JSON object")
            return

        try:
            await self.handle_message(message)
        except TutorServerError as exc:
            await _send_error(self.client.websocket, exc.code, exc.msg)

    async def handle_message(self, message: Dict[str, Any]) -> None:
        msg_type = message.get("type")
        engine = self.engine

        if msg_type == "start_round":
            engine.start_new_round()
            await self._send_state()
            await self._run_bot_turns()
        elif msg_type == "action":
            action, amount = _parse_action(message)
            engine.handle_player_action(action, amount)
            await self._send_state()
            await self._run_bot_turns()
        elif msg_type == "bot_turn":
            engine.trigger_bot_action()
            await self._send_state()
        elif msg_type == "advance":
            engine.advance_turn()
            await self._send_state()
        elif msg_type == "set_difficulty":
            try:
                engine.set_difficulty(message.get("difficulty", ""))
            except ValueError as exc:
                raise TutorServerError("BAD_DIFFICULTY", str(exc)) from None
            await self._send_state()
        elif msg_type == "set_guided":
            engine.guided_mode = bool(message.get("enabled"))
            await self._send_state()
            await self._run_bot_turns()
        elif msg_type == "guidance":
            guidance = guidance_for(engine.snapshot(), seat=HUMAN_SEAT, reveal_opponent=bool(message.get("reveal")))
            await self.client.send_json({"type": "guidance", **guidance.as_payload()})
        elif msg_type == "tip":
            await self.client.send_json({"type": "tip", "text": tutorial_tip(engine.stage)})
        else:
            raise TutorServerError("UNKNOWN_TYPE", f"Unsupported message type: {msg_type}")

    async def _run_bot_turns(self) -> None:
        # Automatic mode: wait, move the bot, show the result, repeat until the
        # human has to act. Guided mode leaves every bot move to "advance".
        while not self.engine.guided_mode and self.engine.is_bot_turn():
            if self.config.bot_delay_ms > 0:
                await asyncio.sleep(self.config.bot_delay_ms / 1000)
            self.engine.trigger_bot_action()
            await self._send_state()

    def _state(self) -> Dict[str, Any]:
        snapshot = self.engine.snapshot()
        bot_seats = [view.seat for view in snapshot.players if not view.is_human]
        return snapshot.as_payload(hide_seats=bot_seats)

    async def _send_state(self) -> None:
        await self.client.send_json({"type": "state", **self._state()})


def _session_config(base: TableConfig, hello: Dict[str, Any]) -> TableConfig:
    config = base
    name = hello.get("name")
    if isinstance(name, str) and name.strip():
        config = replace(config, human_name=name.strip())
    if "difficulty" in hello:
        try:
            config = replace(config, difficulty=Difficulty.parse(hello["difficulty"]))
        except ValueError as exc:
            raise TutorServerError("BAD_DIFFICULTY", str(exc)) from None
    if "guided" in hello:
        config = replace(config, guided_mode=bool(hello["guided"]))
    return config


async def handle_connection(
    websocket: websockets.WebSocketServerProtocol,
    config: TableConfig,
    seed: Optional[int] = None,
) -> None:
    # First message must be "hello"; it may tweak name, difficulty and mode.
    try:
        hello = json.loads(await websocket.recv())
    except websockets.ConnectionClosed:
        LOGGER.info("Client left before hello")
        return
    except (TypeError, ValueError):
        hello = None
    if not isinstance(hello, dict) or hello.get("type") != "hello":
        await _send_error(websocket, "BAD_HELLO", "Expected hello")
        return

    try:
        session_config = _session_config(config, hello)
    except TutorServerError as exc:
        await _send_error(websocket, exc.code, exc.msg)
        return

    client = TutorClient(name=session_config.human_name, websocket=websocket)
    session = TutorialSession(session_config, client, seed=seed)
    try:
        await session.run()
    except websockets.ConnectionClosed:
        LOGGER.info("Tutorial client %s disconnected", client.name)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Tutorial session crashed for %s: %s", client.name, exc)


def connection_handler(config: TableConfig, seed: Optional[int] = None):
    # Every connection gets its own engine; a seed makes each table deal the same.
    async def _handler(ws):
        await handle_connection(ws, config, seed=seed)

    return _handler


async def run_server(host: str, port: int, config: TableConfig, seed: Optional[int] = None) -> None:
    async with websockets.serve(connection_handler(config, seed), host, port):
        LOGGER.info("Tutorial server listening on %s:%s", host, port)
        await asyncio.Future()

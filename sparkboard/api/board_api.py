from loguru import logger

from sparkboard.api.base_api import BaseApi, require_actor
from sparkboard.exceptions import APIError
from sparkboard.models.board import Board, BoardPartial
from sparkboard.models.meta import build_patch
from sparkboard.models.user import Actor
from sparkboard.utils.validation import validate_board_name, validate_id


class BoardApi(BaseApi):

    async def get_boards(self, actor: Actor | None = None) -> list[Board]:
        """
        Gets boards, newest first.

        :param actor: Restrict to this user's boards (row-level security already
            limits results to boards the session can see)
        :return: List of boards
        """
        filters = {'user_id': actor.id} if actor else None
        rows = await self._client.query('boards', filters=filters, order='created_at.desc')
        return [Board(**row) for row in rows]

    async def get_board(self, board_id: str) -> Board:
        """
        Gets a single board.

        :raises APIError: If the board does not exist (status 404)
        """
        validate_id(board_id, "board_id")
        rows = await self._client.query('boards', filters={'id': board_id})
        if not rows:
            raise APIError(f"Board {board_id} not found", status_code=404)
        return Board(**rows[0])

    async def create_board(self, actor: Actor | None, name: str) -> Board:
        """
        Creates a board owned by the actor.

        :raises NotAuthenticatedError: If actor is None
        :raises ValidationError: If the name is empty or too long
        """
        actor = require_actor(actor)
        validate_board_name(name)
        row = await self._client.insert('boards', {'name': name.strip(), 'user_id': actor.id})
        return Board(**row)

    async def rename_board(self, board_id: str, name: str) -> Board:
        validate_id(board_id, "board_id")
        validate_board_name(name)
        patch = build_patch(BoardPartial, name=name.strip())
        rows = await self._client.update('boards', {'id': board_id}, patch)
        if not rows:
            raise APIError(f"Board {board_id} not found", status_code=404)
        return Board(**rows[0])

    async def delete_board(self, board_id: str) -> None:
        """
        Deletes a board and its sparks.

        Sparks go first; if that fails the board is left in place.
        """
        validate_id(board_id, "board_id")
        await self._client.delete('sparks', {'board_id': board_id})
        await self._client.delete('boards', {'id': board_id})
        logger.info(f"Deleted board {board_id}")

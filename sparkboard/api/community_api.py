from sparkboard.api.base_api import BaseApi, require_actor
from sparkboard.models.community import POST_SELECT, CommunityAttachment, CommunityPost
from sparkboard.models.content import PostKind
from sparkboard.models.user import Actor, Profile
from sparkboard.utils.validation import validate_caption, validate_id


class CommunityApi(BaseApi):

    async def get_feed(self, limit: int | None = None) -> list[CommunityPost]:
        """
        Gets the community feed, newest first, with attachments embedded.

        :param limit: Maximum number of posts
        :return: List of posts
        """
        rows = await self._client.query(
            'community_posts',
            select=POST_SELECT,
            order='created_at.desc',
            limit=limit
        )
        return [CommunityPost(**row) for row in rows]

    async def get_posts_for_user(self, user_id: str, post_kind: PostKind | None = None) -> list[CommunityPost]:
        """
        Gets one user's posts, newest first.

        :param user_id: Author
        :param post_kind: Only posts of this kind
        """
        validate_id(user_id, "user_id")
        filters = {'user_id': user_id}
        if post_kind is not None:
            filters['type'] = post_kind.value
        rows = await self._client.query(
            'community_posts',
            filters=filters,
            select=POST_SELECT,
            order='created_at.desc'
        )
        return [CommunityPost(**row) for row in rows]

    async def create_post(self, actor: Actor | None, post_kind: PostKind, caption: str | None = None) -> CommunityPost:
        """
        Creates an (as yet empty) community post.

        :raises NotAuthenticatedError: If actor is None
        """
        actor = require_actor(actor)
        validate_caption(caption)
        row = await self._client.insert('community_posts', {
            'user_id': actor.id,
            'type': post_kind.value,
            'caption': caption,
        })
        return CommunityPost(**row)

    async def create_attachments(
        self,
        post_id: str,
        attachments: list[CommunityAttachment]
    ) -> list[CommunityAttachment]:
        """Inserts all attachments of a post in a single request."""
        validate_id(post_id, "post_id")
        rows = await self._client.insert_many(
            'community_attachments',
            [attachment.to_row(post_id) for attachment in attachments]
        )
        return [CommunityAttachment(**row) for row in rows]

    async def delete_attachments(self, post_id: str) -> None:
        validate_id(post_id, "post_id")
        await self._client.delete('community_attachments', {'post_id': post_id})

    async def delete_post(self, post_id: str) -> None:
        validate_id(post_id, "post_id")
        await self._client.delete('community_posts', {'id': post_id})

    async def get_profiles(self, user_ids: set[str]) -> dict[str, Profile]:
        """Gets public profiles for the given users, keyed by user id."""
        if not user_ids:
            return {}
        rows = await self._client.query('profiles', filters={'id': ('in', sorted(user_ids))})
        return {row['id']: Profile(**row) for row in rows}

# chirp/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from datetime import timedelta
from typing import Optional, List

from firebase_admin import firestore

from chirp.api.errors import InternalServerError, TooManyRequests
from chirp.api.profile.services import UserService
from chirp.models.post import Post, PostWithAuthor
from chirp.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    게시글 저장/조회, 작성자 정보 결합, 작성 빈도 제한을 포함합니다.
    """
    def __init__(self, user_service: UserService, db=None, feed_limit: int = 100,
                 rate_limit: int = 3, rate_window_seconds: int = 60):
        self.db = db or firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.user_service = user_service
        self.feed_limit = feed_limit
        self.rate_limit = rate_limit
        self.rate_window = timedelta(seconds=rate_window_seconds)

    @staticmethod
    def _to_post(data: dict) -> Post:
        data = DateTimeUtils.from_firestore(data)
        return Post(
            post_id=data['post_id'],
            content=data['content'],
            author_id=data['author_id'],
            created_at=data['created_at']
        )

    def _attach_authors(self, posts: List[Post]) -> List[PostWithAuthor]:
        authors = self.user_service.get_authors_by_ids(p.author_id for p in posts)
        result = []
        for post in posts:
            author = authors.get(post.author_id)
            if author is None:
                logging.error(f"게시글 작성자 정보 없음 (post_id: {post.post_id}, author_id: {post.author_id})")
                raise InternalServerError("Author for post not found")
            result.append(PostWithAuthor(post=post, author=author))
        return result

    def count_recent_posts(self, author_id: str) -> int:
        """작성 빈도 제한 구간 안에서 사용자가 작성한 게시물 수를 반환합니다."""
        cutoff = DateTimeUtils.now() - self.rate_window
        query = self.posts_ref.where('author_id', '==', author_id).where('created_at', '>=', cutoff)
        count_result = query.count().get()
        return count_result[0][0].value

    def create_post(self, author_id: str, content: str) -> Post:
        """새로운 게시글을 생성하고 Firestore에 저장합니다."""
        if self.count_recent_posts(author_id) >= self.rate_limit:
            logging.info(f"게시글 작성 빈도 제한 초과 (author_id: {author_id})")
            raise TooManyRequests()

        new_post = Post(
            post_id=str(uuid.uuid4()),
            content=content,
            author_id=author_id,
            created_at=DateTimeUtils.now()
        )
        try:
            self.posts_ref.document(new_post.post_id).set(DateTimeUtils.for_firestore(asdict(new_post)))
        except Exception as e:
            logging.error(f"게시글 생성 실패 (author_id: {author_id}): {e}", exc_info=True)
            raise
        logging.info(f"게시글 생성 완료 (post_id: {new_post.post_id}, author_id: {author_id})")
        return new_post

    def get_all(self) -> List[PostWithAuthor]:
        """최신순 피드를 작성자 정보와 함께 조회합니다."""
        query = self.posts_ref.order_by('created_at', direction=firestore.Query.DESCENDING).limit(self.feed_limit)
        posts = [self._to_post(doc.to_dict()) for doc in query.stream()]
        return self._attach_authors(posts)

    def get_by_id(self, post_id: str) -> Optional[PostWithAuthor]:
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            return None
        return self._attach_authors([self._to_post(doc.to_dict())])[0]

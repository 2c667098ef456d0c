"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: services/votes.py – переключение голосов «нравится / не нравится».

Таблица переходов для пары (пользователь, цель):

    текущее     | like          | dislike
    ------------+---------------+---------------
    нет голоса  | like          | dislike
    like        | нет голоса    | dislike
    dislike     | like          | нет голоса

Цель (пост или комментарий) проверяется до чтения голоса; если её нет,
поднимается TargetNotFound и запись не выполняется. Чтение и изменение голоса
идут в одной транзакции под блокировкой записи (FOR UPDATE, в SQLite –
BEGIN IMMEDIATE), уникальный ключ (user_id, цель) страхует от
параллельной двойной вставки.
"""

from dataclasses import dataclass

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import StorageFailure, TargetNotFound
from extensions import db
from models.comment import Comment
from models.post import Post
from models.vote import CommentVote, PostVote
from services.transactions import begin_write_transaction

POST = "post"
COMMENT = "comment"

# вид цели -> (модель цели, модель голоса, имя внешнего ключа в модели голоса)
_TARGETS = {
    POST: (Post, PostVote, "post_id"),
    COMMENT: (Comment, CommentVote, "comment_id"),
}

_MAX_ATTEMPTS = 2


@dataclass
class VoteSummary:
    likes: int = 0
    dislikes: int = 0
    user_vote: bool | None = None

    @property
    def has_voted(self) -> bool:
        return self.user_vote is not None

    @property
    def is_like(self) -> bool:
        return self.user_vote is True


def next_vote_state(current: bool | None, want_like: bool) -> bool | None:
    """Новое состояние голоса: повтор того же действия снимает голос."""
    if current is not None and current == want_like:
        return None
    return want_like


def _target(kind: str):
    try:
        return _TARGETS[kind]
    except KeyError:
        raise ValueError(f"Unknown vote target: {kind}") from None


def toggle_vote(user_id: int, kind: str, target_id: int, want_like: bool) -> bool | None:
    """Применяет like/dislike и возвращает итоговое состояние (None – голоса нет)."""
    target_model, vote_model, fk_name = _target(kind)
    fk_column = getattr(vote_model, fk_name)

    for attempt in range(1, _MAX_ATTEMPTS + 1):
        try:
            begin_write_transaction()
            exists = db.session.query(target_model.id).filter(target_model.id == target_id).first()
            if exists is None:
                db.session.rollback()
                raise TargetNotFound(kind, target_id)

            vote = (
                vote_model.query.filter(vote_model.user_id == user_id, fk_column == target_id)
                .with_for_update()
                .populate_existing()
                .one_or_none()
            )
            current = vote.is_like if vote is not None else None
            new_state = next_vote_state(current, want_like)

            if vote is None:
                db.session.add(vote_model(user_id=user_id, is_like=new_state, **{fk_name: target_id}))
            elif new_state is None:
                db.session.delete(vote)
            else:
                vote.is_like = new_state

            db.session.commit()
            return new_state
        except IntegrityError:
            # Параллельный запрос успел вставить голос той же пары: перечитываем
            db.session.rollback()
            current_app.logger.warning(
                "Конфликт голосования (%s %s, пользователь %s), попытка %s",
                kind,
                target_id,
                user_id,
                attempt,
            )
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Ошибка сохранения голоса (%s %s)", kind, target_id)
            raise StorageFailure("Error processing vote") from exc

    raise StorageFailure("Error processing vote")


def toggle_post_vote(user_id: int, post_id: int, want_like: bool) -> bool | None:
    return toggle_vote(user_id, POST, post_id, want_like)


def toggle_comment_vote(user_id: int, comment_id: int, want_like: bool) -> bool | None:
    return toggle_vote(user_id, COMMENT, comment_id, want_like)


def get_user_vote(user_id: int, kind: str, target_id: int) -> bool | None:
    _, vote_model, fk_name = _target(kind)
    vote = vote_model.query.filter(
        vote_model.user_id == user_id,
        getattr(vote_model, fk_name) == target_id,
    ).one_or_none()
    return vote.is_like if vote is not None else None


def summarize_votes(kind: str, target_ids, user_id: int | None = None) -> dict[int, VoteSummary]:
    """Счётчики голосов и голос текущего пользователя для набора целей."""
    _, vote_model, fk_name = _target(kind)
    fk_column = getattr(vote_model, fk_name)
    target_ids = list(target_ids)
    summaries = {target_id: VoteSummary() for target_id in target_ids}
    if not target_ids:
        return summaries

    rows = (
        db.session.query(
            fk_column,
            func.sum(case((vote_model.is_like.is_(True), 1), else_=0)),
            func.sum(case((vote_model.is_like.is_(False), 1), else_=0)),
        )
        .filter(fk_column.in_(target_ids))
        .group_by(fk_column)
        .all()
    )
    for target_id, likes, dislikes in rows:
        summaries[target_id].likes = int(likes or 0)
        summaries[target_id].dislikes = int(dislikes or 0)

    if user_id is not None:
        own_votes = vote_model.query.filter(fk_column.in_(target_ids), vote_model.user_id == user_id).all()
        for vote in own_votes:
            summaries[getattr(vote, fk_name)].user_vote = vote.is_like

    return summaries

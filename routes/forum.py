"""
Программа: «Forum» – серверный форум для обсуждений.
Модуль: routes/forum.py – страницы форума и действия над постами.

Назначение модуля:
- Главная страница и страницы категорий с фильтрами «мои посты» / «понравившиеся».
- Просмотр поста (счётчик просмотров), создание поста и комментария.
- Голоса за посты и комментарии.

Пути /post/... и /comment/... разбираются по грамматике /<ресурс>/<id>[/<действие>].
Порядок проверок: форма пути и числовой id, затем вход пользователя, затем
существование цели.
"""

from flask import redirect, render_template, request, url_for
from sqlalchemy import func
from werkzeug.exceptions import MethodNotAllowed

from errors import AuthRequired, MalformedIdentifier, TargetNotFound, ValidationError
from extensions import db
from models.category import Category
from models.comment import Comment
from models.post import Post
from models.vote import PostVote
from services.votes import COMMENT, POST, summarize_votes, toggle_comment_vote, toggle_post_vote
from utils.auth_gate import optional_auth, optional_identity, require_auth, require_identity
from utils.paths import parse_resource_path
from utils.validation import (
    normalize_content,
    normalize_title,
    parse_category_ids,
    validate_category_selection,
    validate_comment_content,
    validate_post_content,
    validate_post_title,
)

FILTER_MY_POSTS = "my-posts"
FILTER_LIKED_POSTS = "liked-posts"


def _reply_counts(post_ids) -> dict[int, int]:
    post_ids = list(post_ids)
    if not post_ids:
        return {}
    rows = (
        db.session.query(Comment.post_id, func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
        .all()
    )
    return {post_id: count for post_id, count in rows}


def _render_post_list(user, category: Category | None = None):
    """Список постов с учётом фильтра из строки запроса."""
    filter_name = request.args.get("filter", "")
    query = Post.query
    if category is not None:
        query = query.filter(Post.categories.any(Category.id == category.id))

    if filter_name == FILTER_MY_POSTS:
        if user is None:
            raise AuthRequired()
        query = query.filter(Post.user_id == user.id)
        list_title = "My Posts"
    elif filter_name == FILTER_LIKED_POSTS:
        if user is None:
            raise AuthRequired()
        query = query.join(PostVote, PostVote.post_id == Post.id).filter(
            PostVote.user_id == user.id,
            PostVote.is_like.is_(True),
        )
        list_title = "Liked Posts"
    else:
        filter_name = ""
        list_title = "Recent Posts" if category is None else "All Posts"

    if category is not None:
        list_title = f"{list_title} in {category.name}"
        query = query.order_by(Post.is_pinned.desc(), Post.created_at.desc())
    else:
        query = query.order_by(Post.created_at.desc())

    posts = query.all()
    post_ids = [post.id for post in posts]
    return render_template(
        "category.html" if category is not None else "home.html",
        viewer=user,
        categories=Category.query.order_by(Category.name).all(),
        category=category,
        posts=posts,
        votes=summarize_votes(POST, post_ids, user.id if user else None),
        reply_counts=_reply_counts(post_ids),
        list_title=list_title,
        current_filter=filter_name,
    )


def _render_post_page(post: Post, user, comment_error: str | None = None, comment_draft: str = ""):
    user_id = user.id if user else None
    comments = list(post.comments)
    return render_template(
        "post.html",
        viewer=user,
        post=post,
        post_votes=summarize_votes(POST, [post.id], user_id)[post.id],
        comments=comments,
        comment_votes=summarize_votes(COMMENT, [comment.id for comment in comments], user_id),
        comment_error=comment_error,
        comment_draft=comment_draft,
    )


def _validate_post_form(raw_title: str, raw_content: str, raw_category_ids: list[str]):
    """Возвращает нормализованные заголовок, текст и выбранные категории."""
    for validator, value, field in (
        (validate_post_title, raw_title, "title"),
        (validate_post_content, raw_content, "content"),
        (validate_category_selection, raw_category_ids, "category_id[]"),
    ):
        ok, reason = validator(value)
        if not ok:
            raise ValidationError(reason, field=field)

    category_ids = parse_category_ids(raw_category_ids)
    selected = Category.query.filter(Category.id.in_(category_ids)).all()
    missing = sorted(set(category_ids) - {category.id for category in selected})
    if missing:
        raise ValidationError(
            f"Invalid category selection: category {missing[0]} does not exist",
            field="category_id[]",
        )

    return normalize_title(raw_title), normalize_content(raw_content), selected


def _view_post(post_id: int, user):
    updated = (
        Post.query.filter(Post.id == post_id)
        .update({Post.view_count: Post.view_count + 1}, synchronize_session=False)
    )
    if not updated:
        raise TargetNotFound("post", post_id)
    db.session.commit()

    return _render_post_page(db.session.get(Post, post_id), user)


def _create_comment(post_id: int, user):
    post = db.session.get(Post, post_id)
    if post is None:
        raise TargetNotFound("post", post_id)

    raw_content = request.form.get("content") or ""
    ok, reason = validate_comment_content(raw_content)
    if not ok:
        return _render_post_page(post, user, comment_error=reason, comment_draft=raw_content)

    comment = Comment(content=normalize_content(raw_content), user_id=user.id, post_id=post.id)
    db.session.add(comment)
    db.session.commit()
    return redirect(url_for("post_dispatch", tail=post.id), code=303)


def register_routes(app):
    @app.get("/")
    @optional_auth
    def home(user):
        return _render_post_list(user)

    @app.get("/category/<slug>")
    @optional_auth
    def category_view(slug, user):
        category = Category.query.filter_by(slug=slug).first()
        if category is None:
            raise TargetNotFound("category", slug)
        return _render_post_list(user, category=category)

    @app.route("/post/create", methods=["GET", "POST"])
    @require_auth
    def create_post(user):
        categories = Category.query.order_by(Category.name).all()
        if request.method == "GET":
            return render_template("create_post.html", viewer=user, categories=categories, selected_ids=[])

        raw_title = request.form.get("title") or ""
        raw_content = request.form.get("content") or ""
        raw_category_ids = request.form.getlist("category_id[]")

        try:
            title, content, selected = _validate_post_form(raw_title, raw_content, raw_category_ids)
        except ValidationError as exc:
            return render_template(
                "create_post.html",
                viewer=user,
                categories=categories,
                error=exc.message,
                title_value=raw_title,
                content_value=raw_content,
                selected_ids=raw_category_ids,
            )

        post = Post(title=title, content=content, user_id=user.id, categories=selected)
        db.session.add(post)
        db.session.commit()
        app.logger.info("Пользователь %s создал пост %s", user.id, post.id)
        return redirect(url_for("post_dispatch", tail=post.id), code=303)

    @app.route("/post/", methods=["GET", "POST"])
    def post_missing_id():
        raise MalformedIdentifier("Post ID is required.")

    @app.route("/post/<segments:tail>", methods=["GET", "POST"])
    def post_dispatch(tail):
        target = parse_resource_path("post", tail)

        if target.action is None:
            if request.method != "GET":
                raise MethodNotAllowed(valid_methods=["GET"])
            return _view_post(target.target_id, optional_identity())

        if request.method != "POST":
            raise MethodNotAllowed(valid_methods=["POST"])
        user = require_identity()
        toggle_post_vote(user.id, target.target_id, want_like=target.action == "like")
        return redirect(url_for("post_dispatch", tail=target.target_id), code=303)

    @app.post("/comment/")
    def comment_missing_id():
        raise MalformedIdentifier("Comment ID is required.")

    @app.post("/comment/<segments:tail>")
    def comment_dispatch(tail):
        # /comment/<post_id> создаёт комментарий, /comment/<comment_id>/<действие> – голос
        id_label = "comment" if "/" in tail else "post"
        target = parse_resource_path("comment", tail, id_label=id_label)
        user = require_identity()

        if target.action is None:
            return _create_comment(target.target_id, user)

        toggle_comment_vote(user.id, target.target_id, want_like=target.action == "like")
        comment = db.session.get(Comment, target.target_id)
        return redirect(url_for("post_dispatch", tail=comment.post_id), code=303)

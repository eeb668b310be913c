# moviechat/app.py
import logging
import re
from datetime import datetime

from flask import Flask, request, jsonify, abort
from flask_cors import CORS
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from werkzeug.security import generate_password_hash, check_password_hash

from moviechat.config import Config
from moviechat.models import db, User, Movie, Chat, init_schema

logger = logging.getLogger(__name__)

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")


def envelope(status, message):
    return jsonify({"status": status, "message": message})


def store_error_text(exc):
    """The driver's own message when there is one, e.g. 'UNIQUE constraint failed: users.username'."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def read_json(**fields):
    """Pull the named fields out of the JSON body, checking each against its type.

    Anything that is not an object with every field present and well typed
    aborts with 422.
    """
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        abort(422, description="Invalid request body: expected a JSON object")

    values = []
    for name, kind in fields.items():
        value = data.get(name)
        # bool is an int subclass; true/false are not ids
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            abort(422, description=f"Invalid request body: '{name}' must be {kind.__name__}")
        values.append(value)
    return values


def require_range(name, value, low, high):
    if not low <= value <= high:
        abort(422, description=f"Invalid request body: '{name}' out of range")
    return value


def password_matches(stored_hash, password):
    # hashes werkzeug cannot parse (e.g. bcrypt rows) never match
    try:
        return check_password_hash(stored_hash, password)
    except ValueError:
        logger.warning("Unreadable password hash on login")
        return False


def parse_movie_id(raw):
    """Lenient path parsing: anything that is not a 32-bit integer becomes 0."""
    if not _INT_RE.fullmatch(raw):
        return 0
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        return 0
    return value


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    db.init_app(app)
    CORS(
        app,
        origins="*",
        methods=["GET", "POST", "OPTIONS"],
        supports_credentials=False,
        send_wildcard=True,
    )

    # users and chats only; movies must already exist
    with app.app_context():
        logger.info(
            "Using database %s",
            make_url(app.config["SQLALCHEMY_DATABASE_URI"]).render_as_string(hide_password=True),
        )
        init_schema()
        logger.info("Schema ready (users, chats)")

    # ---------------- ERRORS ----------------
    @app.errorhandler(HTTPException)
    def http_error(e):
        if e.code is None or e.code < 400:
            return e
        return envelope("error", e.description), e.code

    @app.errorhandler(SQLAlchemyError)
    def store_error(e):
        db.session.rollback()
        logger.warning("Store error on %s %s: %s", request.method, request.path, e)
        return envelope("error", store_error_text(e)), 500

    # ---------------- REGISTER ----------------
    @app.route("/register", methods=["POST"])
    def register():
        username, password = read_json(username=str, password=str)

        pwd_hash = generate_password_hash(password)

        try:
            db.session.add(User(username=username, password=pwd_hash, logged_in=False))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning("Register failed for %r: %s", username, e)
            return envelope("Failed", f"Gagal Daftar: {store_error_text(e)}"), 400

        return envelope("success", "Berhasil Daftar"), 200

    # ---------------- LOGIN ----------------
    @app.route("/login", methods=["POST"])
    def login():
        username, password = read_json(username=str, password=str)

        u = User.query.filter_by(username=username).first()
        if not u:
            return envelope("Failed", "User tidak ditemukan"), 401

        if not password_matches(u.password, password):
            return envelope("Failed", "Password salah"), 401

        u.logged_in = True
        db.session.commit()

        return envelope("success", "Berhasil Login"), 200

    # ---------------- LOGOUT ----------------
    @app.route("/logout", methods=["POST"])
    def logout():
        (username,) = read_json(username=str)

        # no check that the caller is the one who logged in
        matched = User.query.filter_by(username=username).update({"logged_in": False})
        db.session.commit()

        if matched == 0:
            return envelope("error", "User tidak ditemukan"), 400

        return envelope("success", "Sayonara"), 200

    # ---------------- MOVIES ----------------
    @app.route("/movies")
    def movies():
        base_url = app.config["IMAGE_BASE_URL"]
        return jsonify([m.to_dict(base_url) for m in Movie.query.all()])

    # ---------------- POST CHAT ----------------
    @app.route("/chat", methods=["POST"])
    def post_chat():
        movie_id, user_id, chat = read_json(movie_id=int, user_id=int, chat=str)
        require_range("movie_id", movie_id, INT32_MIN, INT32_MAX)
        require_range("user_id", user_id, INT64_MIN, INT64_MAX)

        if not chat.strip():
            return envelope("error", "Pesan chat tidak boleh kosong"), 400

        try:
            db.session.add(Chat(movie_id=movie_id, user_id=user_id, chat=chat))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.warning("Chat insert failed for movie %s: %s", movie_id, e)
            return envelope("error", f"Gagal mengirim pesan: {store_error_text(e)}"), 500

        return envelope("success", "Pesan terkirim"), 200

    # ---------------- LIST CHATS ----------------
    @app.route("/chat/<movie_id>")
    def get_chats(movie_id):
        res = db.session.execute(text("""
            SELECT c.chat_id, c.movie_id, c.user_id, u.username, c.chat, c.created_at
            FROM chats c
            JOIN users u ON c.user_id = u.id
            WHERE c.movie_id = :mid
            ORDER BY c.created_at ASC, c.chat_id ASC
        """), {"mid": parse_movie_id(movie_id)})

        chats = []
        for row in res:
            item = dict(row._mapping)
            # SQLite hands back the text; other drivers return datetime
            if isinstance(item["created_at"], datetime):
                item["created_at"] = item["created_at"].strftime("%Y-%m-%d %H:%M:%S")
            chats.append(item)

        return jsonify(chats)

    return app


def main():
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    app = create_app()
    host, port = app.config["HOST"], app.config["PORT"]
    logger.info("Server running at http://%s:%s", host, port)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()

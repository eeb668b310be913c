# moviechat/models.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash, never plaintext
    logged_in = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<User {self.username}>"


class Movie(db.Model):
    """Catalog row, filled from a TMDB export; both movie and TV shaped records fit."""

    __tablename__ = "movies"
    id = db.Column(db.Integer, primary_key=True)
    adult = db.Column(db.Boolean)
    backdrop_path = db.Column(db.String(255))
    genre_ids = db.Column(db.String(255))
    origin_country = db.Column(db.String(50))
    original_language = db.Column(db.String(20))
    original_name = db.Column(db.String(255))
    original_title = db.Column(db.String(255))
    overview = db.Column(db.Text)
    popularity = db.Column(db.Float)
    poster_path = db.Column(db.String(255))
    first_air_date = db.Column(db.String(20))
    release_date = db.Column(db.String(20))
    name = db.Column(db.String(255))
    title = db.Column(db.String(255))
    video = db.Column(db.Boolean)
    vote_average = db.Column(db.Float)
    vote_count = db.Column(db.Integer)

    def to_dict(self, image_base_url):
        return {
            "id": self.id,
            "adult": self.adult,
            "backdrop_path": image_url(image_base_url, self.backdrop_path),
            "genre_ids": self.genre_ids,
            "origin_country": self.origin_country,
            "original_language": self.original_language,
            "original_name": self.original_name,
            "original_title": self.original_title,
            "overview": self.overview,
            "popularity": self.popularity,
            "poster_path": image_url(image_base_url, self.poster_path),
            "first_air_date": self.first_air_date,
            "release_date": self.release_date,
            "name": self.name,
            "title": self.title,
            "video": self.video,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
        }


class Chat(db.Model):
    __tablename__ = "chats"
    chat_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    movie_id = db.Column(db.Integer, db.ForeignKey("movies.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    chat = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())


def image_url(base_url, path):
    if path is None:
        return None
    return f"{base_url}{path}"


def init_schema():
    """Create users and chats if missing. movies is owned by the catalog import."""
    db.metadata.create_all(bind=db.engine, tables=[User.__table__, Chat.__table__])

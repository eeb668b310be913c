import logging
import os
import unittest
from unittest import mock

from moviechat.app import parse_movie_id
from moviechat.config import database_uri, log_level
from moviechat.models import image_url


class DatabaseUriTestCase(unittest.TestCase):
    def test_database_url_wins(self):
        env = {"DATABASE_URL": "postgresql://u:p@db/movies", "DB_USER": "root",
               "DB_PASSWORD": "secret", "DB_NAME": "movies"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(database_uri(), "postgresql://u:p@db/movies")

    def test_mysql_from_db_parts(self):
        env = {"DB_USER": "root", "DB_PASSWORD": "secret", "DB_NAME": "movies", "DB_HOST": "db"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(database_uri(), "mysql+pymysql://root:secret@db:3306/movies")

    def test_incomplete_db_parts_fall_back_to_sqlite(self):
        with mock.patch.dict(os.environ, {"DB_USER": "root"}, clear=True):
            uri = database_uri()
        self.assertTrue(uri.startswith("sqlite:///"))
        self.assertTrue(uri.endswith("movies.db"))

    def test_sqlite_path_override(self):
        with mock.patch.dict(os.environ, {"SQLITE_PATH": "/tmp/chat.db"}, clear=True):
            self.assertEqual(database_uri(), "sqlite:////tmp/chat.db")


class LogLevelTestCase(unittest.TestCase):
    def test_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(log_level(), "INFO")

    def test_lowercase_is_normalized(self):
        with mock.patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            level = log_level()
        self.assertEqual(level, "DEBUG")
        # logging accepts it as a level name
        logging.getLogger("moviechat.test").setLevel(level)


class ParseMovieIdTestCase(unittest.TestCase):
    def test_integers(self):
        self.assertEqual(parse_movie_id("42"), 42)
        self.assertEqual(parse_movie_id("-3"), -3)
        self.assertEqual(parse_movie_id("+7"), 7)

    def test_garbage_defaults_to_zero(self):
        for raw in ["abc", "1.5", "12abc", " 5", "٣"]:
            self.assertEqual(parse_movie_id(raw), 0, raw)

    def test_out_of_range_defaults_to_zero(self):
        self.assertEqual(parse_movie_id("2147483647"), 2147483647)
        self.assertEqual(parse_movie_id("2147483648"), 0)
        self.assertEqual(parse_movie_id("-2147483649"), 0)


class ImageUrlTestCase(unittest.TestCase):
    def test_prefixes_path(self):
        self.assertEqual(
            image_url("https://image.tmdb.org/t/p/original", "/abc.jpg"),
            "https://image.tmdb.org/t/p/original/abc.jpg",
        )

    def test_missing_path_stays_missing(self):
        self.assertIsNone(image_url("https://image.tmdb.org/t/p/original", None))


if __name__ == "__main__":
    unittest.main()

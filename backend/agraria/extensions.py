# Overview: Flask extension instances for the key-value storage database.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

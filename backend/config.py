import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'sentence-game-secret-key'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'teacher123'
    # Where the game document lives: 'file' (JSON on disk) or 'database'
    STORE_BACKEND = os.environ.get('STORE_BACKEND', 'file')
    DATA_FILE = os.environ.get('DATA_FILE') or os.path.join(BASE_DIR, 'data.json')
    # Reinitialize an unreadable document instead of failing every request
    STORE_RECOVER_CORRUPT = os.environ.get('STORE_RECOVER_CORRUPT', 'true').lower() == 'true'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'whowrote.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REMEMBER_COOKIE_DURATION = timedelta(hours=24)
    PORT = int(os.environ.get('PORT', '3998'))

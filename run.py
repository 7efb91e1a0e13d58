"""Gateway entry point.

Usage:
    Development:  python run.py   (binds HOST:PORT from the environment)
    Production:   gunicorn --bind 0.0.0.0:5000 --workers 2 --threads 4 run:app
"""
from chat_gateway import create_app

app = create_app()

if __name__ == "__main__":
    settings = app.config["SETTINGS"]
    app.run(host=settings.HOST, port=settings.PORT, debug=settings.FLASK_DEBUG)

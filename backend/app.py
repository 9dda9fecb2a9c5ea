"""
Entry point for running the Comment Connections game API.

    flask --app app run          # from the backend/ directory
    gunicorn "app:app"
"""

from commentlinks.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True)

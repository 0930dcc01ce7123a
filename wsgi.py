"""WSGI entry point for the SentiLight web server."""
import os

from apps.web.main import create_app

app = create_app(os.environ.get('SENTILIGHT_CONFIG'))

if __name__ == "__main__":
    app.run()

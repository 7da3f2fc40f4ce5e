import logging

from flask import Flask

from config import Config
from models.database import init_db
from web.routes import bp as web_bp
from scheduler.setup import create_scheduler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_flask_app() -> Flask:
    app = Flask(__name__)
    app.secret_key = Config.SECRET_KEY
    app.register_blueprint(web_bp)
    return app


# --- Module-level setup (runs when gunicorn imports app:flask_app) ---

# 1. Init database
logger.info("Initializing database...")
init_db()

# 2. Start scheduler
logger.info("Starting scheduler...")
scheduler = create_scheduler()
scheduler.start()

# 3. Create Flask app
flask_app = create_flask_app()
logger.info(f"Xero redirect URI: {Config.XERO_REDIRECT_URI}")


if __name__ == "__main__":
    logger.info(f"Server is running on http://localhost:{Config.PORT}")
    try:
        flask_app.run(host="0.0.0.0", port=Config.PORT, debug=False)
    finally:
        scheduler.shutdown()

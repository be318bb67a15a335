import os
from dotenv import load_dotenv

# SECRET_KEY, SQLALCHEMY_DATABASE_URI y RUNLOG_* pueden venir de .env
load_dotenv()

from runlog import create_app

app = create_app()

# Arranque local: `python run.py` (equivale a `flask --app run:app run`)
if __name__ == "__main__":
    debug = os.getenv("FLASK_ENV", "development") == "development"
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)), debug=debug)

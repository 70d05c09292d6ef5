"""Development server entry point.

Database commands live on the app CLI: ``flask init-db [--drop]``,
``flask seed-db`` and ``flask create-admin``.
"""
import os
from dotenv import load_dotenv
from attendance_tracker import create_app

load_dotenv()

app = create_app(os.getenv('FLASK_ENV', 'development'))


if __name__ == '__main__':
    app.run(
        host=os.environ.get('HOST', '127.0.0.1'),
        port=int(os.environ.get('PORT', 5000)),
        debug=app.config.get('DEBUG', False)
    )

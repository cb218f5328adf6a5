# run.py
from dotenv import load_dotenv
import logging
import os

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from bhreads import create_app
from bhreads.migrations import run_migrations

app = create_app()

if __name__ == '__main__':
    if app.config.get('RUN_MIGRATIONS_ON_STARTUP'):
        try:
            run_migrations(app.services['db'])
        except Exception as e:
            # 기동 시 마이그레이션은 최선형(best-effort)이며 재시도하지 않습니다.
            logging.error(f"Startup migration failed: {e}", exc_info=True)

    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_RUN_PORT', 5000))
    debug = app.config.get('DEBUG', False)
    app.run(host=host, port=port, debug=debug)

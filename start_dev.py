#!/usr/bin/env python3
"""
Alpha Visa Diagnosis - Development Server Launcher

Usage:
    python start_dev.py                          # Start with default settings
    python start_dev.py --demo                   # Seed every demo diagnosis first
    python start_dev.py --demo --scenario strong_founder
    python start_dev.py --port 8080 --skip-install
"""

import os
import sys
import argparse
import subprocess
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
REQUIRED_MODULES = ('flask', 'flask_sqlalchemy', 'flask_limiter', 'sqlalchemy', 'anthropic')


def missing_dependencies():
    """Import names of required packages that are not installed"""
    missing = []
    for module in REQUIRED_MODULES:
        try:
            __import__(module)
        except ImportError:
            missing.append(module)
    return missing


def setup_environment():
    """Default to a development SQLite database under instance/"""
    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('FLASK_DEBUG', 'True')

    db_path = PROJECT_ROOT / 'instance' / 'alpha_diagnosis.db'
    db_path.parent.mkdir(exist_ok=True)
    os.environ.setdefault('DATABASE_URL', f'sqlite:///{db_path}')


def load_demo_data(app, scenarios=None):
    """Seed demo diagnoses unless the database already has some"""
    from src.database.models import db, Diagnosis
    from src.demo_data import load_demo_data_to_db

    with app.app_context():
        existing = Diagnosis.query.count()
        if existing:
            print(f"  Database has {existing} diagnoses, skipping demo data")
            return

        for code in load_demo_data_to_db(db.session, scenarios=scenarios):
            print(f"  Demo diagnosis: /api/diagnoses/{code}")


def main():
    parser = argparse.ArgumentParser(description='Alpha Visa Diagnosis Development Server')
    parser.add_argument('--demo', action='store_true', help='Load demo diagnoses on startup')
    parser.add_argument('--scenario', action='append',
                        help='Demo scenario to load (repeatable; default: all)')
    parser.add_argument('--port', type=int, default=5101, help='Port to run server on (default: 5101)')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--skip-install', action='store_true', help='Skip dependency installation')
    args = parser.parse_args()

    if sys.version_info < (3, 9):
        sys.exit("Python 3.9+ required")

    if not args.skip_install:
        missing = missing_dependencies()
        if missing:
            print(f"Installing project (missing: {', '.join(missing)})")
            try:
                subprocess.check_call([sys.executable, '-m', 'pip', 'install', '-e', str(PROJECT_ROOT), '-q'])
            except subprocess.CalledProcessError as e:
                sys.exit(f"Installation failed: {e}")

    setup_environment()
    sys.path.insert(0, str(PROJECT_ROOT))

    from web.app import create_app
    app = create_app()

    if args.demo:
        load_demo_data(app, scenarios=args.scenario)

    print(f"Server running at http://{args.host}:{args.port} (health: /health)")
    try:
        app.run(debug=True, port=args.port, host=args.host, use_reloader=True)
    except KeyboardInterrupt:
        print("Server stopped.")


if __name__ == '__main__':
    main()

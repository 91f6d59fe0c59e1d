"""
Root pytest configuration.

Puts the project root on sys.path so `src`, `config` and `web` import
the same way the application imports them.
"""

import os
import sys
from pathlib import Path

root_str = str(Path(__file__).parent.absolute())

if root_str in sys.path:
    sys.path.remove(root_str)
sys.path.insert(0, root_str)

os.environ.setdefault('FLASK_ENV', 'testing')

from __future__ import annotations

import os

# Must run before classduel.db.session builds its engine.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

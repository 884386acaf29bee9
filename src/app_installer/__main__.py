from __future__ import annotations

from app_installer.core.cli import main

raise SystemExit(main())

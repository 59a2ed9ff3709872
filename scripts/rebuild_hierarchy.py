"""Recompute the employee_hierarchy projection from the manager pointers.

Useful after bulk imports that wrote employees.manager_id directly.
"""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hr_management.common.logging_utils import setup_logging
from hr_management.config import get_settings_module
from hr_management.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG))
    entries = container.hierarchy_service.rebuild_hierarchy()
    print(f"OK: hierarchy rebuilt ({len(entries)} entries)")


if __name__ == "__main__":
    main()

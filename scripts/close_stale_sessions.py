"""Run the stale-session sweep once, for cron or any external scheduler.

Exit status is 1 when at least one company batch failed.
"""

from __future__ import annotations

import importlib
import json
import logging
import signal
import sys
import threading
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_engine.payroll_engine.common.datetime_utils import now_local
from src.payroll_engine.payroll_engine.container import EngineSettings, build_container


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine_settings = EngineSettings.from_module(settings)
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=engine_settings)

    cancel = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: cancel.set())

    report = container.stale_session_closer.run(now_local(engine_settings.tz_name), cancel=cancel)
    print(json.dumps(report.to_dict(), indent=2))
    return 1 if report.companies_failed else 0


if __name__ == "__main__":
    raise SystemExit(main())

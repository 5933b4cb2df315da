from __future__ import annotations

APP_NAME = "RegDesk"
APP_VERSION = "1.4.0"

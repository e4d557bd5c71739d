from __future__ import annotations

import importlib

from instantlog.config import get_settings_module
from instantlog.database.bootstrap import ensure_kv_table
from instantlog.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)

    ensure_kv_table(DatabaseConnection.get_instance(config))
    print(f"OK: kv_store ready -> {config.user}@{config.host}:{config.port}/{config.database}")


if __name__ == "__main__":
    main()

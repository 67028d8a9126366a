"""Запуск консольного клиента погоды без установки пакета: python weather_app.py get London"""

from weather_cli.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

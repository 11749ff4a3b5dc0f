"""Operator tool: show or reset the stored campaign record.

Reset is destructive and deliberately not exposed over HTTP.

    python -m scripts.reset_config --show
    python -m scripts.reset_config --yes
"""
import argparse
import json
import sys

from apps.thermometer.config import configure_logging, get_settings
from apps.thermometer.errors import StorageError
from apps.thermometer.services.config_store import create_store


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show or reset the donation thermometer config")
    parser.add_argument("--show", action="store_true", help="print the current record and exit")
    parser.add_argument("--yes", action="store_true", help="reset without asking")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    store = create_store(settings)
    try:
        if args.show:
            print(json.dumps(store.get_config().to_dict(), ensure_ascii=False, indent=2))
            return 0
        if not args.yes:
            answer = input(f"Reset campaign config on backend '{store.kind.value}' to defaults? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted.")
                return 1
        config = store.reset()
    except StorageError as e:
        print(f"Storage error: {e.detail}", file=sys.stderr)
        return 2
    finally:
        store.close()
    print(f"Config reset at {config.last_updated.isoformat()}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

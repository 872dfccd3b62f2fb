"""Print edits from the Wikimedia recent changes stream.

    pip install -e .

    # Everything, live
    python examples/recent_changes.py

    # Resume from a point in time, only one wiki shown
    python examples/recent_changes.py --since 2024-01-01T00:00:00Z --wiki enwiki
"""

import argparse
import logging
import signal

from eventstreams import (
    DEFAULT_URL,
    RECENT_CHANGE,
    Client,
    RecentChangeEvent,
    StreamConnectionError,
)


def main(url: str, since: str | None, wiki: str | None) -> int:
    client = Client(url, since=since)
    signal.signal(signal.SIGINT, lambda *_: client.stop())

    def on_change(event: RecentChangeEvent) -> None:
        if wiki and event.wiki != wiki:
            return
        print(f"[{event.wiki}] {event.type:<10} {event.title} ({event.user})")

    with client:
        try:
            client.subscribe(RECENT_CHANGE, on_change)
        except StreamConnectionError as exc:
            print(f"Stream failed: {exc}")
            return 1

    print(f"Resume with --since {client.last_position()}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Wikimedia recent changes")
    parser.add_argument("--url", default=DEFAULT_URL)
    parser.add_argument("--since", default=None, help="ISO-8601 timestamp to resume from")
    parser.add_argument("--wiki", default=None, help="Only print this wiki, e.g. enwiki")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    raise SystemExit(main(args.url, args.since, args.wiki))

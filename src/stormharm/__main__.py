"""Build the storm impact report: ``python -m stormharm``.

Run from the project root, like ``kedro run``; relative paths in
``conf/base/parameters.yml`` resolve against it.
"""

from __future__ import annotations

from pathlib import Path

from stormharm.runner import build_report


def main() -> str:
    return build_report(Path.cwd())


if __name__ == "__main__":
    main()

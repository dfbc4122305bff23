from __future__ import annotations

from message_visualizer.launcher import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

from __future__ import annotations

import sys

from feature_kernel.app.runtime import main

if __name__ == "__main__":
    sys.exit(main())

# SPDX-License-Identifier: MIT
"""Allow running as `python -m cmakegen`."""

import sys

from cmakegen.cli import main

sys.exit(main())

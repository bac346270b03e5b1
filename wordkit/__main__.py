#!/usr/bin/env python3
"""Allow running as: python -m wordkit"""

import sys

from .cli import main

sys.exit(main())

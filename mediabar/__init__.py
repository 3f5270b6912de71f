#!/usr/bin/env python3
"""mediabar: publish what media-control says is playing"""

__version__ = "1.0.0"

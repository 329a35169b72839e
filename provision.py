# !/usr/bin/env python3
# filename: provision.py
# -*- coding: utf-8 -*-
"""
Entry point for the workstation provisioner.
"""

import sys

from provisioner.main import main

if __name__ == "__main__":
    sys.exit(main())

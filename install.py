#!/usr/bin/env python3
"""
Look&Feel Installer
Mirrors a look&feel repository into $HOME and wires up xinitrc hooks.
"""

import sys

from lookandfeel.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

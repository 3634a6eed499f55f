"""
Allow running the package directly: python -m escapetime
"""
import sys

from .cli import main

sys.exit(main())

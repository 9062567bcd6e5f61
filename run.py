"""
Root entry point for the LifeTunes application.
Bootstraps the lifetunes package and runs the command-line front end.
"""

import sys
import os

# Ensure the project root is in python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from lifetunes.main import main

if __name__ == "__main__":
    sys.exit(main())

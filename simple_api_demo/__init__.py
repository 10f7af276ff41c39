"""
Simple API Demo

Runs a plaintext main server and a JSON application server from one process.
"""

__version__ = "0.1.0"

from .main import main


if __name__ == "__main__":
    main()

"""
Equality Vanguard admin API - development server launcher.
Usage: python api_server.py
"""

from vanguard_admin.api.app import main

if __name__ == "__main__":
    main()

"""
Trellis CLI.

Usage:
    trellis routes app.controllers.books app.controllers.photos
    trellis check app.controllers.books
"""

__version__ = "0.1.0"
__cli_name__ = "trellis"

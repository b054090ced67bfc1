"""WSGI entry point for production server."""

import sys

from leasehold import create_app

# Print the full traceback during early startup so a failed worker boot
# shows up in the process logs.
try:
    app = create_app()
except Exception:
    import traceback

    print("\nFATAL: Failed to create Flask application during startup:\n", file=sys.stderr)
    traceback.print_exc()
    raise

if __name__ == "__main__":
    app.run()

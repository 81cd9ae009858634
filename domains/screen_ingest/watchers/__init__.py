"""
Screenshot Watchers

- poller.py - Scan/idle loop that dispatches new images exactly once
- notifier.py - watchdog-based early wake-up for the scan loop
"""

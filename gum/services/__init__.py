"""Parsing and watching services used by the handlers.

- html_scanner.py: shortlink/canonical extraction from HTML (selectolax)
- watcher.py: watchdog-backed directory watching
- jekyll/: Jekyll config, page and front matter parsing
- newbase60.py: NewBase60 codec for WordPress-era short links
"""

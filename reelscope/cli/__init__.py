"""CLI tools for reelscope.

- ``python -m reelscope.cli.analyze <url>`` -- extract and score a URL,
  optionally with ``--file`` for the media itself.
- ``python -m reelscope.cli`` -- same as ``analyze``.
"""

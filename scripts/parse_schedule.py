#!/usr/bin/env python3
"""CLI wrapper expanding an SSIM file, URL or raw text into flight occurrences."""

from ssim_parser.cli import main

if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())

#!/usr/bin/env python3
"""
R2 command-line client

Run this script to issue a single request against an S3-compatible
object storage service configured in ~/.r2-cli.cfg.

Usage:
    python run.py create-bucket -b my-bucket
    python run.py put-object -b my-bucket -k a.txt -f a.txt
    python run.py list-objects -b my-bucket -f logs/
    python run.py count-objects -b my-bucket
    python run.py create-multipart-upload -b my-bucket -k big.bin
    python run.py upload-part -b my-bucket -k big.bin -n 1 -f part1 -u <upload-id>
    python run.py complete-multipart-upload -b my-bucket -k big.bin -u <upload-id> -f parts.json
"""

import sys
from r2cli.cli import main

if __name__ == "__main__":
    sys.exit(main())

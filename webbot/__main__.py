# /webbot/__main__.py
from webbot.adapters.cli import main

raise SystemExit(main())
